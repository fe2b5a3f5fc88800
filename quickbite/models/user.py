"""
Account data models and API schemas
"""
from datetime import datetime
from typing import Optional, List, Dict, Any
from sqlalchemy import Column, String, Boolean, DateTime, Text, JSON, ForeignKey, Integer
from sqlalchemy.orm import relationship
from pydantic import BaseModel, ConfigDict, Field
from quickbite.core.database import Base, generate_id, utcnow

ROLES = ("user", "admin", "super_admin")
ADMIN_ROLES = ("admin", "super_admin")

def default_notification_preferences() -> Dict[str, bool]:
    return {"email": True, "sms": True, "push": True}

# Database Models

class Account(Base):
    """Verified user account"""
    __tablename__ = "accounts"

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    mobile = Column(String(20), unique=True, index=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    role = Column(String(20), default="user", nullable=False)  # user, admin, super_admin

    # Profile information
    first_name = Column(String(100))
    last_name = Column(String(100))
    avatar_url = Column(String(500))

    # Preferences
    favorite_cuisines = Column(JSON, default=list)
    dietary_restrictions = Column(JSON, default=list)
    notification_preferences = Column(JSON, default=default_notification_preferences)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    addresses = relationship(
        "Address", back_populates="account", cascade="all, delete-orphan", order_by="Address.position"
    )
    orders = relationship("Order", back_populates="account", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

class Address(Base):
    """Saved delivery address of an account"""
    __tablename__ = "addresses"

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    account_id = Column(String(50), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    label = Column(String(50), nullable=False)  # "Home", "Work", "Other"
    street = Column(Text, nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    account = relationship("Account", back_populates="addresses")

class PendingSignup(Base):
    """Unverified signup attempt awaiting its one-time code"""
    __tablename__ = "pending_signups"

    id = Column(String(50), primary_key=True, index=True, default=generate_id)
    username = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    mobile = Column(String(20), nullable=False)
    otp_code = Column(String(6), nullable=False)
    otp_expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)

# Pydantic Models for API

class SignupRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    mobile: Optional[str] = None

class VerifyOtpRequest(BaseModel):
    email: Optional[str] = None
    otp: Optional[str] = None

class ResendOtpRequest(BaseModel):
    email: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

class AddressCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    label: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")
    is_default: bool = Field(False, alias="isDefault")

class AddressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    label: str
    street: str
    city: str
    state: str
    zip_code: str
    is_default: bool

class ProfileUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    avatar_url: Optional[str] = Field(None, alias="avatar")
    favorite_cuisines: Optional[List[str]] = Field(None, alias="cuisine")
    dietary_restrictions: Optional[List[str]] = Field(None, alias="dietaryRestrictions")
    notification_preferences: Optional[Dict[str, bool]] = Field(None, alias="notifications")

class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    profile: Optional[ProfileUpdate] = None

class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")

class RoleUpdate(BaseModel):
    role: Optional[str] = None

class AccountSummary(BaseModel):
    """Account fields returned alongside auth tokens"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    mobile: str
    role: str
    is_verified: bool
    created_at: Optional[datetime] = None

class AccountOut(AccountSummary):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    favorite_cuisines: List[str] = []
    dietary_restrictions: List[str] = []
    notification_preferences: Dict[str, bool] = {}
    addresses: List[AddressOut] = []
    updated_at: Optional[datetime] = None

class PendingSignupOut(BaseModel):
    """Admin view of a signup request; never exposes the code or hash"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    mobile: str
    otp_expires_at: datetime
    created_at: Optional[datetime] = None

def account_payload(account: Account) -> Dict[str, Any]:
    return AccountSummary.model_validate(account).model_dump(mode="json")
