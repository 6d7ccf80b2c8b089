"""
Bearer-token identity: issue and verify HS256 JWTs, and role-gate routes.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from careercoach.core.config import settings

ALGORITHM = "HS256"

bearer = HTTPBearer(auto_error=False)


class Principal(BaseModel):
    """The caller behind a verified token."""
    sub: str
    roles: List[str] = []
    email: Optional[str] = None

    def has_any(self, *roles: str) -> bool:
        return bool(set(self.roles) & set(roles))


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status.HTTP_401_UNAUTHORIZED, detail, headers={"WWW-Authenticate": "Bearer"})


def issue_token(user_id: str, roles: List[str], email: Optional[str] = None, ttl_minutes: Optional[int] = None) -> str:
    issued = datetime.now(timezone.utc)
    ttl = timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES if ttl_minutes is None else ttl_minutes)
    claims = {"sub": user_id, "roles": list(roles), "iss": settings.APP_NAME, "iat": issued, "exp": issued + ttl}
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.APP_SECRET.get_secret_value(), algorithm=ALGORITHM)


def decode_token(token: str) -> Principal:
    """Verify signature, expiry and issuer; raises ``jwt.PyJWTError`` otherwise."""
    claims = jwt.decode(token, settings.APP_SECRET.get_secret_value(), algorithms=[ALGORITHM],
                        issuer=settings.APP_NAME, options={"require": ["sub", "exp"]})
    return Principal(sub=claims["sub"], roles=claims.get("roles") or [], email=claims.get("email"))


def current_principal(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Principal:
    if creds is None:
        raise _unauthorized("Missing bearer token")
    try:
        return decode_token(creds.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token expired")
    except jwt.PyJWTError:
        raise _unauthorized("Invalid token")


def require_roles(*allowed: str):
    """Dependency factory admitting callers holding at least one of ``allowed``."""
    def guard(principal: Principal = Depends(current_principal)) -> Principal:
        if not principal.has_any(*allowed):
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Insufficient role")
        return principal
    return guard
