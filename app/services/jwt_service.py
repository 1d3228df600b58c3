# app/services/jwt_service.py - Bearer token validation for API requests
"""
Students sign in through the external NorthStar auth service, which mints
HS256 access tokens carrying `sub` (email) and `user_id`. This API only
checks those tokens and loads the matching student.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.config import settings
from app.models.user import User

bearer_scheme = HTTPBearer()

ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(minutes=30)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    claims: Dict[str, Any], ttl: Optional[timedelta] = None
) -> str:
    """Sign an access token the same way the auth service does"""
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + (ttl or ACCESS_TOKEN_TTL)
    payload["type"] = "access"
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise _unauthorized("Invalid or expired token")

    if claims.get("type") != "access":
        raise _unauthorized("Not an access token")
    if claims.get("sub") is None or claims.get("user_id") is None:
        raise _unauthorized("Token is missing the student identity")

    return claims


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Student named by the bearer token; every /api route scopes its queries to it"""
    claims = decode_access_token(credentials.credentials)

    student = (
        db.query(User)
        .filter(User.id == claims["user_id"], User.email == claims["sub"])
        .first()
    )
    if student is None:
        raise _unauthorized("Student account no longer exists")

    if not student.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Student account is inactive"
        )

    return student
