from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from typing import List, Optional
from datetime import timedelta
import logging

from database import Base, get_db
from dependencies import get_current_active_user, require_admin, require_superadmin
from models.user import User, UserRole, UserStatus
from schemas.user import UserCreate, UserUpdate, UserResponse, UserLogin, Token
from auth import verify_password, get_password_hash, create_access_token, ACCESS_TOKEN_EXPIRE_MINUTES

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()

PRIVILEGED_ROLES = (UserRole.ADMIN, UserRole.SUPERADMIN)


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def ensure_can_manage(current_user: User, role: UserRole, action: str):
    """Admin accounts are only created, edited or promoted by a superadmin"""
    if role in PRIVILEGED_ROLES and current_user.role != UserRole.SUPERADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only a superadmin can {action} admin accounts"
        )


def ensure_username_free(db: Session, username: str, user_id: Optional[int] = None):
    query = db.query(User).filter(func.lower(User.username) == username.lower())
    if user_id is not None:
        query = query.filter(User.id != user_id)
    if query.first():
        raise HTTPException(status_code=400, detail=f"Username '{username}' is already taken")


def recorded_work(db: Session, user_id: int) -> List[str]:
    """Tables holding rows stamped with this user"""
    tables = []
    for mapper in Base.registry.mappers:
        model = mapper.class_
        if model is User or "user_id" not in model.__table__.columns:
            continue
        if db.query(model.user_id).filter(model.user_id == user_id).first():
            tables.append(model.__tablename__)
    return sorted(tables)


# Authentication
@router.post("/auth/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    """Exchange a username and password for a bearer token"""
    user = db.query(User).filter(User.username == credentials.username.strip()).first()

    if not user or not verify_password(credentials.password, str(user.password)):
        logger.warning(f"Failed login for '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if user.status != UserStatus.ACTIVE:
        logger.warning(f"Login refused for {user.status.value} account '{user.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"User account is {user.status.value}"
        )

    token = create_access_token(
        data={"sub": user.username},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    logger.info(f"User '{user.username}' logged in")
    return {"access_token": token, "token_type": "bearer"}


@router.get("/auth/me", response_model=UserResponse)
def get_current_user_info(current_user: User = Depends(get_current_active_user)):
    return current_user


# Operator accounts
@router.get("/users", response_model=List[UserResponse])
def list_users(
    role: Optional[UserRole] = Query(None),
    user_status: Optional[UserStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    if user_status is not None:
        query = query.filter(User.status == user_status)
    return query.order_by(User.username).offset(skip).limit(limit).all()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    payload: UserCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    ensure_can_manage(current_user, payload.role, "create")
    ensure_username_free(db, payload.username)

    try:
        account = User(
            username=payload.username,
            password=get_password_hash(payload.password),
            role=payload.role,
            status=payload.status,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        logger.info(f"User {current_user.id} created {account.role.value} account '{account.username}'")
        return account
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating user: {e}")
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.put("/users/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    payload: UserUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    account = get_user_or_404(db, user_id)
    if account.id != current_user.id:
        ensure_can_manage(current_user, account.role, "edit")
    if payload.role is not None:
        ensure_can_manage(current_user, payload.role, "promote to")

    if account.id == current_user.id and (
        (payload.role is not None and payload.role != account.role)
        or (payload.status is not None and payload.status != UserStatus.ACTIVE)
    ):
        raise HTTPException(status_code=400, detail="You cannot change your own role or status")

    if payload.username is not None:
        ensure_username_free(db, payload.username, user_id=account.id)

    try:
        changed = []
        if payload.username is not None and payload.username != account.username:
            account.username = payload.username
            changed.append("username")
        if payload.password:
            account.password = get_password_hash(payload.password)
            changed.append("password")
        if payload.role is not None and payload.role != account.role:
            account.role = payload.role
            changed.append("role")
        if payload.status is not None and payload.status != account.status:
            account.status = payload.status
            changed.append("status")

        db.commit()
        db.refresh(account)
        if changed:
            logger.info(f"User {current_user.id} changed {', '.join(changed)} of user {account.id}")
        return account
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update user")


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    current_user: User = Depends(require_superadmin),
    db: Session = Depends(get_db)
):
    """Remove an account that never recorded any work; others are suspended instead"""
    account = get_user_or_404(db, user_id)
    if account.id == current_user.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")

    tables = recorded_work(db, account.id)
    if tables:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User '{account.username}' has recorded work in {', '.join(tables)}; suspend the account instead"
        )

    try:
        db.delete(account)
        db.commit()
        logger.info(f"User {current_user.id} deleted user {user_id}")
        return {"message": "User deleted successfully"}
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete user")
