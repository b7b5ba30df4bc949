# gifty/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import redis

from gifty.domain.errors import CheckoutInProgressError
from gifty.utils.settings import CHECKOUT_LOCK_ATTEMPTS


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )


# wait until the previous checkout of the same user is done
def lock_wait_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(CHECKOUT_LOCK_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=0.5),
        retry=retry_if_exception_type(CheckoutInProgressError),
    )
