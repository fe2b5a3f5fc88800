"""
User profile API router
"""
from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from quickbite.api.auth import get_current_user
from quickbite.core.database import get_db
from quickbite.core.responses import envelope
from quickbite.models.user import (
    Account, AccountOut, AddressCreate, AddressOut, ChangePasswordRequest, UserUpdate
)
from quickbite.services import accounts

router = APIRouter(prefix="/user", tags=["users"])

@router.get("/profile")
async def get_profile(current_user: Account = Depends(get_current_user)) -> Any:
    return envelope(data=AccountOut.model_validate(current_user))

@router.put("/profile")
async def update_profile(
    payload: UserUpdate,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    """Update current user profile"""
    account = accounts.update_profile(
        db,
        current_user,
        username=payload.username,
        email=payload.email,
        mobile=payload.mobile,
        profile=payload.profile.model_dump(exclude_unset=True) if payload.profile else None,
    )
    return envelope(message="Profile updated successfully", data=AccountOut.model_validate(account))

@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    accounts.change_password(db, current_user, payload.current_password, payload.new_password)
    return envelope(message="Password changed successfully")

@router.get("/addresses")
async def get_addresses(current_user: Account = Depends(get_current_user)) -> Any:
    addresses = accounts.list_addresses(current_user)
    return envelope(data=[AddressOut.model_validate(a) for a in addresses])

@router.post("/addresses")
async def add_address(
    payload: AddressCreate,
    current_user: Account = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> Any:
    addresses = accounts.add_address(
        db,
        current_user,
        label=payload.label,
        street=payload.street,
        city=payload.city,
        state=payload.state,
        zip_code=payload.zip_code,
        is_default=payload.is_default,
    )
    return envelope(
        message="Address added successfully",
        data=[AddressOut.model_validate(a) for a in addresses],
    )
