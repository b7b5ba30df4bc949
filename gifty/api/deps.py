# gifty/api/deps.py
from dataclasses import dataclass

import jwt
from fastapi import Depends, Header, HTTPException

from gifty.services.lock_service import LockService
from gifty.utils.security import decode_token


@dataclass
class CurrentUser:
    id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def get_current_user(authorization: str | None = Header(default=None)) -> CurrentUser:
    """
    Expects "Authorization: Bearer <token>". The identity in the token is
    trusted as is, the user row is not re-read.
    """
    if not authorization:
        raise HTTPException(status_code=401, detail="No token provided")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        claims = decode_token(token.strip())
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    # reset tokens carry no role and must not authenticate requests
    if "purpose" in claims or "id" not in claims or "role" not in claims:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    return CurrentUser(id=int(claims["id"]), role=claims["role"])


def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def get_lock_service() -> LockService:
    return LockService()
