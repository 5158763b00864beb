import jwt
import uuid
from jwt import InvalidTokenError, ExpiredSignatureError
from datetime import datetime, timedelta, timezone
from app.core.config import settings
from fastapi import HTTPException, Request

def _encode(data: dict, expires: timedelta, token_type: str) -> str:
    to_encode = data.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires,
        "type": token_type,
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGO)

def create_access_token(data: dict, expires_min: int | None = None):
    minutes = expires_min if expires_min is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    return _encode(data, timedelta(minutes=minutes), "access")

def create_refresh_token(data: dict, expires_days: int | None = None):
    days = expires_days if expires_days is not None else settings.REFRESH_TOKEN_EXPIRE_DAYS
    return _encode(data, timedelta(days=days), "refresh")

def decode_token(token: str, token_type: str = "access"):
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGO]
        )
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired")
    except InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid Token")

    if payload.get("type") != token_type:
        raise HTTPException(status_code=401, detail="Invalid Token")

    return payload

def get_token_from_cookie(request: Request) -> str:
    token = request.cookies.get("access_token")
    if not token:
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1]

    if not token:
        raise HTTPException(401, "Unauthorized access")

    return token.strip()
