"""
Authentication API router and authorization dependencies
"""
from typing import Any, Optional
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from quickbite.core.database import get_db
from quickbite.core.exceptions import Forbidden, Unauthenticated, Unverified
from quickbite.core.responses import envelope
from quickbite.core.security import JWTError, verify_token
from quickbite.models.user import (
    ADMIN_ROLES, Account, AccountOut, LoginRequest, ResendOtpRequest, SignupRequest,
    VerifyOtpRequest, account_payload
)
from quickbite.services import accounts

router = APIRouter(prefix="/auth", tags=["authentication"])

bearer_scheme = HTTPBearer(auto_error=False)

def _resolve_account(credentials: Optional[HTTPAuthorizationCredentials], db: Session) -> Account:
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    try:
        payload = verify_token(credentials.credentials)
    except JWTError:
        raise Unauthenticated("Access denied. Invalid token.")

    account_id = payload.get("sub")
    account = db.query(Account).filter(Account.id == account_id).first() if account_id else None
    if account is None:
        raise Unauthenticated("Access denied. User not found.")
    return account

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Account:
    """Resolve the bearer token to a verified account"""
    account = _resolve_account(credentials, db)
    if not account.is_verified:
        raise Unverified()
    return account

async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[Account]:
    """Like get_current_user, but anonymous or invalid callers resolve to None"""
    if credentials is None:
        return None
    try:
        account = _resolve_account(credentials, db)
    except Unauthenticated:
        return None
    return account if account.is_verified else None

async def require_admin(current_user: Account = Depends(get_current_user)) -> Account:
    if current_user.role not in ADMIN_ROLES:
        raise Forbidden()
    return current_user

async def require_super_admin(current_user: Account = Depends(get_current_user)) -> Account:
    if current_user.role != "super_admin":
        raise Forbidden("Access denied. Super admin privileges required.")
    return current_user

@router.post("/signup")
async def signup(payload: SignupRequest, db: Session = Depends(get_db)) -> Any:
    """Start signup and send the one-time verification code"""
    pending, delivery = accounts.submit_signup(
        db, payload.username, payload.email, payload.password, payload.mobile
    )
    return envelope(
        message=delivery["message"],
        data={"pending_signup": True, "email": pending.email, "delivery": delivery["method"]},
    )

@router.post("/resend-otp")
async def resend_otp(payload: ResendOtpRequest, db: Session = Depends(get_db)) -> Any:
    pending, delivery = accounts.resend_otp(db, payload.email)
    return envelope(
        message=delivery["message"],
        data={"pending_signup": True, "email": pending.email, "delivery": delivery["method"]},
    )

@router.post("/verify-otp")
async def verify_otp(payload: VerifyOtpRequest, db: Session = Depends(get_db)) -> Any:
    """Verify the code and create the account"""
    account, token = accounts.verify_otp(db, payload.email, payload.otp)
    return envelope(
        message="Account verified successfully",
        data={"user": account_payload(account), "token": token},
    )

@router.post("/login")
async def login(payload: LoginRequest, db: Session = Depends(get_db)) -> Any:
    """Login user and return access token"""
    account, token = accounts.login(db, payload.email or payload.username, payload.password)
    return envelope(
        message="Login successful",
        data={"user": account_payload(account), "token": token},
    )

@router.post("/admin-login")
async def admin_login(payload: LoginRequest, db: Session = Depends(get_db)) -> Any:
    account, token = accounts.admin_login(db, payload.email or payload.username, payload.password)
    return envelope(
        message="Admin login successful",
        data={"user": account_payload(account), "token": token},
    )

@router.get("/me")
async def read_users_me(current_user: Account = Depends(get_current_user)) -> Any:
    """Get current user profile"""
    return envelope(data=AccountOut.model_validate(current_user))
