# app/routers/user.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.models.user import User
from app.schemas.user import AdminUserCreate, UserBasic, UserOut, UserUpdate
from app.utils.auth import get_current_user, require_admin
from app.utils.errors import ConflictError, NotFoundError
from app.utils.permissions import Principal
from app.utils.security import hash_password

router = APIRouter()


@router.get("/", response_model=List[UserBasic])
def get_all_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List users, e.g. to pick project members or assignees"""
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific user by ID"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Create a user with any role - Only admins"""
    if db.query(User).filter(User.email == user.email).first():
        raise ConflictError("User already exists")

    new_user = User(
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        hashed_password=hash_password(user.password),
        role=user.role,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)
    return new_user


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a user - users may edit themselves, admins anyone; only admins change roles"""
    principal = Principal.from_user(current_user)
    if not principal.is_admin and principal.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You can only update your own profile")

    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        raise NotFoundError("User not found")

    update_data = user_update.model_dump(exclude_unset=True)
    if update_data.get("role") is not None and not principal.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only administrators can change roles")

    if update_data.get("email") and update_data["email"] != db_user.email:
        if db.query(User).filter(User.email == update_data["email"], User.id != user_id).first():
            raise ConflictError("Email already registered")

    password = update_data.pop("password", None)
    if password:
        db_user.hashed_password = hash_password(password)

    for field, value in update_data.items():
        if value is not None:
            setattr(db_user, field, value)

    db.commit()
    db.refresh(db_user)
    return db_user
