import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gifty.data.models.user import UserModel
from gifty.domain.errors import (
    AuthenticationError,
    DuplicateEmailError,
    InvalidResetTokenError,
    NotFoundError,
)
from gifty.domain.schemas import RegisterIn, LoginIn
from gifty.repos.user_repo import UserRepo
from gifty.utils.logging import get_logger
from gifty.utils.security import (
    RESET_PURPOSE,
    create_access_token,
    create_reset_token,
    decode_token,
    hash_password,
    verify_password,
)

logger = get_logger(__name__)


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> tuple[UserModel, str]:
        if self.repo.get_by_email(payload.email):
            raise DuplicateEmailError("Email already registered")

        user = UserModel(
            name=payload.name,
            email=payload.email.lower(),
            password=hash_password(payload.password),
            role="customer",
        )
        try:
            created = self.repo.create_user(user)
        except IntegrityError:
            # another registration with the same email committed first
            self.repo.rollback()
            raise DuplicateEmailError("Email already registered")
        logger.info(f"Registered user {created.id}")
        return created, create_access_token(created.id, created.role)

    def login(self, payload: LoginIn) -> tuple[UserModel, str]:
        user = self.repo.get_by_email(payload.email)
        if not user:
            raise NotFoundError("User not found")

        if not verify_password(payload.password, user.password):
            logger.info(f"Failed login for user {user.id}")
            raise AuthenticationError("Wrong password")

        return user, create_access_token(user.id, user.role)

    def get_user(self, user_id: int) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def forgot_password(self, email: str) -> str:
        """Returns a short-lived reset token; there is no mail delivery."""
        user = self.repo.get_by_email(email)
        if not user:
            raise NotFoundError("No account with that email")
        return create_reset_token(user.id)

    def reset_password(self, reset_token: str, new_password: str) -> None:
        try:
            claims = decode_token(reset_token)
        except jwt.InvalidTokenError:
            raise InvalidResetTokenError("Invalid or expired reset token")

        if claims.get("purpose") != RESET_PURPOSE:
            raise InvalidResetTokenError("Invalid or expired reset token")

        user = self.repo.get_user(claims.get("id"))
        if not user:
            raise InvalidResetTokenError("Invalid or expired reset token")

        self.repo.update_password(user, hash_password(new_password))
        logger.info(f"Password reset for user {user.id}")
