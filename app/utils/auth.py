# app/utils/auth.py
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config.settings import AppConfig
from app.database import get_db
from app.models.user import User
from app.utils.permissions import Principal

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{AppConfig.SERVER['api_prefix']}/auth/login")


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    payload = verify_token(token)
    if payload is None:
        raise credentials_exception

    # sub is the user id; the email claim may be stale after a profile change
    subject: Optional[str] = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise credentials_exception

    user = db.query(User).filter(User.id == int(subject)).first()
    if user is None:
        raise credentials_exception

    return user


def get_current_principal(current_user: User = Depends(get_current_user)) -> Principal:
    """Resolve the bearer token to the principal the services authorize against"""
    return Principal.from_user(current_user)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not Principal.from_user(current_user).is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can perform this action",
        )
    return current_user


def verify_token(token: str) -> Optional[dict]:
    """Verify JWT token and return payload without raising exceptions"""
    try:
        return jwt.decode(token, AppConfig.AUTH['secret_key'], algorithms=[AppConfig.AUTH['algorithm']])
    except JWTError:
        return None
