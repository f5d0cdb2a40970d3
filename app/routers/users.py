"""
Users Router
Profile, preferences and password management for the authenticated owner
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.security import create_reset_token, decode_access_token, get_password_hash, verify_password
from app.db import dynamo
from app.models.user import (
    ForgotPasswordRequest,
    PasswordChange,
    PasswordReset,
    PreferencesUpdate,
    ProfileUpdate,
    UserPreferences,
    UserPublic,
)
from app.routers.auth import get_current_user_id

router = APIRouter()
logger = logging.getLogger(__name__)


def _load_user(user_id: str) -> dict:
    user = dynamo.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/profile", response_model=UserPublic)
def get_profile(user_id: str = Depends(get_current_user_id)):
    return UserPublic(**_load_user(user_id))


@router.put("/profile", response_model=UserPublic)
def update_profile(profile: ProfileUpdate, user_id: str = Depends(get_current_user_id)):
    user = _load_user(user_id)

    if profile.email != user["email"]:
        existing = dynamo.get_user_by_email(profile.email)
        if existing and existing["user_id"] != user_id:
            raise HTTPException(status_code=400, detail="Email is already in use")

    updated = dynamo.update_user(user_id, {"name": profile.name, "email": profile.email})
    return UserPublic(**updated)


@router.put("/settings", response_model=UserPublic)
def update_settings(update: PreferencesUpdate, user_id: str = Depends(get_current_user_id)):
    """Merge the supplied preference fields into the stored preferences."""
    user = _load_user(user_id)
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    if "currency" in changes:
        changes["currency"] = changes["currency"].upper()

    preferences = UserPreferences(**user.get("preferences", {})).model_dump()
    preferences.update(changes)
    updated = dynamo.update_user(user_id, {"preferences": preferences})
    return UserPublic(**updated)


@router.put("/password")
def change_password(change: PasswordChange, user_id: str = Depends(get_current_user_id)):
    user = _load_user(user_id)
    if not verify_password(change.current_password, user["password_hash"]):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    dynamo.update_user(user_id, {"password_hash": get_password_hash(change.new_password)})
    logger.info(f"Password changed for user {user_id}")
    return {"message": "Password updated successfully"}


@router.post("/forgot-password")
def forgot_password(payload: ForgotPasswordRequest):
    user = dynamo.get_user_by_email(payload.email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    # No mail transport is configured; the token is only logged.
    reset_token = create_reset_token(user["user_id"])
    logger.info(f"Password reset requested for user {user['user_id']}, token issued: {reset_token[:12]}...")
    return {"message": "Password reset email sent"}


@router.post("/reset-password")
def reset_password(reset: PasswordReset):
    try:
        payload = decode_access_token(reset.token)
    except HTTPException:
        raise HTTPException(status_code=400, detail="Invalid or expired token")
    if payload.get("purpose") != "password_reset" or not payload.get("sub"):
        raise HTTPException(status_code=400, detail="Invalid or expired token")

    user_id = payload["sub"]
    _load_user(user_id)
    dynamo.update_user(user_id, {"password_hash": get_password_hash(reset.password)})
    logger.info(f"Password reset completed for user {user_id}")
    return {"message": "Password reset successful"}
