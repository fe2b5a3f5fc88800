"""
Account, signup verification and profile services

Signup is a two step flow: `submit_signup` parks the request in the
pending_signups table with a one-time code, `verify_otp` promotes it to a
verified Account. Only one pending row exists per email.
"""
import logging
import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quickbite.core.config import settings
from quickbite.core.database import utcnow
from quickbite.core.exceptions import (
    ConflictError,
    ExpiredError,
    InvalidCodeError,
    InvalidCredentialsError,
    NotFoundError,
    UnverifiedAccountError,
    ValidationError,
)
from quickbite.core.security import (
    create_access_token,
    generate_otp,
    get_password_hash,
    is_valid_email,
    is_valid_phone,
    password_policy_violation,
    verify_password,
)
from quickbite.models.user import ADMIN_ROLES, Account, Address, PendingSignup
from quickbite.services.notification_service import notification_service

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_mobile(mobile: str) -> str:
    """Phone numbers are stored without whitespace"""
    return re.sub(r"\s", "", mobile)


def issue_token(account: Account) -> str:
    return create_access_token(
        data={
            "sub": account.id,
            "email": account.email,
            "username": account.username,
            "role": account.role,
        }
    )


def _validate_signup_fields(username, email, password, mobile):
    for name, value in (("username", username), ("email", email), ("password", password), ("mobile", mobile)):
        if not value or not str(value).strip():
            raise ValidationError("All fields are required", field=name)

    if not USERNAME_MIN_LENGTH <= len(username.strip()) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"Username must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters",
            field="username",
        )
    if not is_valid_email(email.strip()):
        raise ValidationError("Invalid email address", field="email")
    violation = password_policy_violation(password)
    if violation:
        raise ValidationError(violation, field="password")
    if not is_valid_phone(mobile):
        raise ValidationError("Invalid phone number", field="mobile")


def _find_conflict(db: Session, email: str, username: str, mobile: str, verified_only: bool = True,
                   exclude_id: Optional[str] = None) -> Optional[str]:
    """Return the name of the first field already taken, in email/username/mobile order"""
    clauses = []
    if email:
        clauses.append(Account.email == email)
    if username:
        clauses.append(Account.username == username)
    if mobile:
        clauses.append(Account.mobile == mobile)
    if not clauses:
        return None

    query = db.query(Account).filter(or_(*clauses))
    if verified_only:
        query = query.filter(Account.is_verified.is_(True))
    if exclude_id:
        query = query.filter(Account.id != exclude_id)
    existing = query.first()
    if not existing:
        return None

    if email and existing.email == email:
        return "email"
    if username and existing.username == username:
        return "username"
    return "mobile"


def purge_stale_pending_signups(db: Session, now: Optional[datetime] = None) -> int:
    """Delete pending signups older than the retention window"""
    cutoff = (now or utcnow()) - timedelta(hours=settings.PENDING_SIGNUP_RETENTION_HOURS)
    deleted = (
        db.query(PendingSignup)
        .filter(PendingSignup.created_at < cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    if deleted:
        logger.info(f"Purged {deleted} stale pending signups")
    return deleted


def submit_signup(db: Session, username: str, email: str, password: str, mobile: str,
                  notifier=None) -> Tuple[PendingSignup, dict]:
    """Validate a signup request, store it as pending and send the one-time code"""
    _validate_signup_fields(username, email, password, mobile)

    username = username.strip()
    email = normalize_email(email)
    mobile = normalize_mobile(mobile)

    conflict = _find_conflict(db, email, username, mobile)
    if conflict:
        raise ConflictError(f"Account with this {conflict} already exists", field=conflict)

    purge_stale_pending_signups(db)

    # Remove any previous pending signup
    db.query(PendingSignup).filter(PendingSignup.email == email).delete(synchronize_session=False)

    otp_code = generate_otp()
    pending = PendingSignup(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        mobile=mobile,
        otp_code=otp_code,
        otp_expires_at=utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
    )
    db.add(pending)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("A signup for this email is already in progress", field="email")
    db.refresh(pending)
    logger.info(f"Pending signup stored for {email}")

    delivery = (notifier or notification_service).send_otp_email(email, otp_code, username)
    return pending, delivery


def resend_otp(db: Session, email: str, notifier=None) -> Tuple[PendingSignup, dict]:
    """Issue a fresh code and expiry for an existing pending signup"""
    if not email or not email.strip():
        raise ValidationError("Email is required", field="email")

    email = normalize_email(email)
    pending = db.query(PendingSignup).filter(PendingSignup.email == email).first()
    if not pending:
        raise NotFoundError("Signup session not found")

    pending.otp_code = generate_otp()
    pending.otp_expires_at = utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES)
    db.commit()
    db.refresh(pending)

    delivery = (notifier or notification_service).send_otp_email(email, pending.otp_code, pending.username)
    return pending, delivery


def verify_otp(db: Session, email: str, code: str, notifier=None) -> Tuple[Account, str]:
    """Promote a pending signup to a verified account"""
    if not email or not code:
        raise ValidationError("Email and OTP required", field="email" if not email else "otp")

    email = normalize_email(email)
    pending = db.query(PendingSignup).filter(PendingSignup.email == email).first()
    if not pending:
        raise NotFoundError("Signup session not found")

    if utcnow() > pending.otp_expires_at:
        db.delete(pending)
        db.commit()
        raise ExpiredError()

    if pending.otp_code != str(code).strip():
        raise InvalidCodeError()

    account = Account(
        username=pending.username,
        email=pending.email,
        password_hash=pending.password_hash,
        mobile=pending.mobile,
        is_verified=True,
    )
    db.add(account)
    db.delete(pending)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Account with these details already exists")
    db.refresh(account)
    logger.info(f"Account verified for {account.email}")

    (notifier or notification_service).send_welcome_email(account.email, account.username)
    return account, issue_token(account)


def _authenticate(db: Session, identifier: str, password: str) -> Account:
    if not identifier or not password:
        raise ValidationError("Email and password required", field="email" if not identifier else "password")

    identifier = identifier.strip()
    account = (
        db.query(Account)
        .filter(or_(Account.email == identifier.lower(), Account.username == identifier))
        .first()
    )
    if not account or not verify_password(password, account.password_hash):
        logger.warning(f"Failed login attempt for {identifier}")
        raise InvalidCredentialsError()
    return account


def login(db: Session, email: str, password: str) -> Tuple[Account, str]:
    """Authenticate by email (or username) and password"""
    account = _authenticate(db, email, password)
    if not account.is_verified:
        raise UnverifiedAccountError()
    return account, issue_token(account)


def admin_login(db: Session, email: str, password: str) -> Tuple[Account, str]:
    account = _authenticate(db, email, password)
    if account.role not in ADMIN_ROLES:
        logger.warning(f"Admin login refused for non-admin {account.email}")
        raise InvalidCredentialsError("Admin not found or unauthorized")
    if not account.is_verified:
        raise UnverifiedAccountError()
    return account, issue_token(account)


# Profile management

PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "avatar_url",
    "favorite_cuisines",
    "dietary_restrictions",
    "notification_preferences",
)


def update_profile(db: Session, account: Account, username: Optional[str] = None,
                   email: Optional[str] = None, mobile: Optional[str] = None,
                   profile: Optional[dict] = None) -> Account:
    if email is not None:
        if not is_valid_email(email.strip()):
            raise ValidationError("Please enter a valid email address", field="email")
        email = normalize_email(email)
    if mobile is not None:
        if not is_valid_phone(mobile):
            raise ValidationError("Please enter a valid phone number", field="mobile")
        mobile = normalize_mobile(mobile)
    if username is not None:
        username = username.strip()
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise ValidationError("Invalid username", field="username")

    conflict = _find_conflict(db, email, username, mobile, verified_only=False, exclude_id=account.id)
    if conflict:
        raise ConflictError(f"This {conflict} is already taken", field=conflict)

    if username:
        account.username = username
    if email:
        account.email = email
    if mobile:
        account.mobile = mobile
    for field, value in (profile or {}).items():
        if field in PROFILE_FIELDS and value is not None:
            setattr(account, field, value)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("These account details are already taken")
    db.refresh(account)
    return account


def change_password(db: Session, account: Account, current_password: str, new_password: str) -> None:
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")

    if not verify_password(current_password, account.password_hash):
        raise ValidationError("Current password is incorrect", field="current_password")

    violation = password_policy_violation(new_password)
    if violation:
        raise ValidationError(violation, field="new_password")

    account.password_hash = get_password_hash(new_password)
    db.commit()
    logger.info(f"Password changed for {account.email}")


def add_address(db: Session, account: Account, label: str, street: str, city: str, state: str,
                zip_code: str, is_default: bool = False):
    for name, value in (("label", label), ("street", street), ("city", city), ("state", state), ("zip_code", zip_code)):
        if not value or not value.strip():
            raise ValidationError("All address fields are required", field=name)

    # At most one default address per account
    if is_default:
        for existing in account.addresses:
            existing.is_default = False

    account.addresses.append(
        Address(
            label=label.strip(),
            street=street.strip(),
            city=city.strip(),
            state=state.strip(),
            zip_code=zip_code.strip(),
            position=len(account.addresses),
            is_default=bool(is_default) or not account.addresses,
        )
    )
    db.commit()
    db.refresh(account)
    return account.addresses


def list_addresses(account: Account):
    return list(account.addresses)
