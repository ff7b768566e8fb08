from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from storefront.core.config import ADMIN_ROLES, JWT_ALGORITHM, JWT_SECRET_KEY

ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: str = "customer"

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


def create_access_token(
    user_id: str,
    role: str = "customer",
    expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
) -> str:
    """Issue a token for the identity provider stand-in (dev scripts and tests)."""
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        # "sub" has to be a string for python-jose
        "sub": str(user_id),
        "role": role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
    }
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except Exception as e:
        raise ValueError("Invalid or expired token") from e


def identity_from_payload(payload: Dict[str, Any]) -> Optional[Identity]:
    raw = payload.get("sub")
    if raw is None:
        return None
    user_id = str(raw).strip()
    if not user_id:
        return None
    role = str(payload.get("role") or "customer").strip().lower()
    return Identity(user_id=user_id, role=role)
