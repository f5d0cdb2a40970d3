import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status

from app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from app.db import dynamo
from app.models.user import UserCreate, UserInDB, UserLogin, UserPublic

router = APIRouter()
logger = logging.getLogger(__name__)


def get_current_user_id(authorization: Optional[str] = Header(None)) -> str:
    """Extract user_id from JWT token"""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token required")

    token = authorization.replace("Bearer ", "", 1).strip()
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id or payload.get("purpose"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user_id


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate):
    existing = dynamo.get_user_by_email(user.email)
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    user_db = UserInDB(
        name=user.name,
        email=user.email,
        password_hash=get_password_hash(user.password),
    )
    dynamo.put_user(user_db.model_dump())
    logger.info(f"Registered user {user_db.user_id}")

    return UserPublic(**user_db.model_dump())


@router.get("/me", response_model=UserPublic)
def get_current_user(user_id: str = Depends(get_current_user_id)):
    """Get current user profile"""
    user = dynamo.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserPublic(**user)


@router.post("/login")
def login(login_data: UserLogin):
    logger.info(f"Login attempt for email: {login_data.email}")
    user = dynamo.get_user_by_email(login_data.email)

    if not user:
        logger.warning(f"User not found: {login_data.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not verify_password(login_data.password, user["password_hash"]):
        logger.warning(f"Invalid password for user: {login_data.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": user["user_id"]})
    logger.info(f"Login successful for user: {login_data.email}")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserPublic(**user).model_dump(),
    }
