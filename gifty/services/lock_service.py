import uuid
from contextlib import contextmanager

import redis

from gifty.domain.errors import CheckoutInProgressError
from gifty.utils.retry import redis_retry, lock_wait_retry
from gifty.utils.settings import REDIS_URL, CHECKOUT_LOCK_TTL_SECONDS
from gifty.utils.logging import get_logger

logger = get_logger(__name__)

# compare-and-delete in one Lua call, so GET and DEL cannot interleave
# with another client's SET
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class LockService:
    """
    -per-user checkout lock (SET NX EX)
    -release only by the holder (token + lua)
    -waiting for a busy lock with bounded retries
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _checkout_key(user_id: int) -> str:
        return f"checkout:{user_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, user_id: int, token: str, ttl: int = CHECKOUT_LOCK_TTL_SECONDS) -> bool:
        key = self._checkout_key(user_id)
        logger.info(f"Acquire lock {key}")
        # SET checkout:1:lock "<token>" NX EX 30
        return bool(self.redis.set(name=key, value=token, nx=True, ex=ttl))

    @redis_retry()
    def release_checkout_lock(self, user_id: int, token: str) -> bool:
        key = self._checkout_key(user_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)

    @lock_wait_retry()
    def _wait_for_checkout_lock(self, user_id: int, token: str) -> None:
        if not self.acquire_checkout_lock(user_id, token):
            raise CheckoutInProgressError(f"Checkout already in progress for user {user_id}")

    @contextmanager
    def checkout_lock(self, user_id: int):
        token = uuid.uuid4().hex
        self._wait_for_checkout_lock(user_id, token)
        try:
            yield token
        finally:
            if not self.release_checkout_lock(user_id, token):
                # ttl ran out before we were done
                logger.warning(f"Checkout lock for user {user_id} expired before release")
