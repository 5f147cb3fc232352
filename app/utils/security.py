# app/utils/security.py
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt
from passlib.context import CryptContext

from app.config.settings import AppConfig

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=AppConfig.AUTH['bcrypt_rounds'],
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT access token; ``sub`` carries the user id as a string"""
    to_encode = data.copy()
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=AppConfig.AUTH['access_token_expire_minutes'])
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, AppConfig.AUTH['secret_key'], algorithm=AppConfig.AUTH['algorithm'])
