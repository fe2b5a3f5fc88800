# tests/test_accounts.py
from datetime import timedelta

import pytest

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
from quickbite.core.security import verify_token
from quickbite.models.user import Account, PendingSignup
from quickbite.services import accounts

from conftest import PASSWORD, make_account


def signup(db, notifier, username="bob", email="bob@example.com", mobile="+919876500000", password=PASSWORD):
    return accounts.submit_signup(db, username, email, password, mobile, notifier=notifier)


def test_signup_stores_pending_row_and_sends_code(db, notifier):
    pending, delivery = signup(db, notifier, email="  Bob@Example.com ")

    assert pending.email == "bob@example.com"
    assert pending.password_hash != PASSWORD
    assert len(pending.otp_code) == 6
    assert notifier.otps == [("bob@example.com", pending.otp_code)]
    assert delivery["method"] == "console"
    assert db.query(Account).count() == 0


@pytest.mark.parametrize("overrides, field", [
    ({"username": ""}, "username"),
    ({"username": "ab"}, "username"),
    ({"email": "nope"}, "email"),
    ({"password": "weak"}, "password"),
    ({"mobile": "123"}, "mobile"),
])
def test_signup_validation(db, notifier, overrides, field):
    with pytest.raises(ValidationError) as excinfo:
        signup(db, notifier, **overrides)
    assert excinfo.value.field == field
    assert db.query(PendingSignup).count() == 0


def test_signup_conflicts_with_verified_account(db, notifier):
    make_account(db, username="alice", email="alice@example.com", mobile="+919876543210")

    with pytest.raises(ConflictError) as excinfo:
        signup(db, notifier, email="ALICE@example.com")
    assert excinfo.value.field == "email"

    with pytest.raises(ConflictError) as excinfo:
        signup(db, notifier, username="alice")
    assert excinfo.value.field == "username"

    with pytest.raises(ConflictError) as excinfo:
        signup(db, notifier, mobile="+919876543210")
    assert excinfo.value.field == "mobile"


def test_signup_stores_mobile_without_spaces(db, notifier):
    pending, _ = signup(db, notifier, mobile="+91 98765 00000")
    assert pending.mobile == "+919876500000"

    make_account(db, username="carol", email="carol@example.com", mobile="+919876511111")
    with pytest.raises(ConflictError) as excinfo:
        signup(db, notifier, email="dave@example.com", username="dave", mobile="+91 98765 11111")
    assert excinfo.value.field == "mobile"


def test_repeat_signup_keeps_one_pending_row_per_email(db, notifier):
    signup(db, notifier)
    second, _ = signup(db, notifier, username="bobby")

    rows = db.query(PendingSignup).filter(PendingSignup.email == "bob@example.com").all()
    assert len(rows) == 1
    assert rows[0].username == "bobby"
    assert rows[0].otp_code == second.otp_code


def test_verify_creates_account_and_token(db, notifier):
    pending, _ = signup(db, notifier)

    account, token = accounts.verify_otp(db, "bob@example.com", pending.otp_code, notifier=notifier)

    assert account.is_verified
    assert account.role == "user"
    assert verify_token(token)["sub"] == account.id
    assert db.query(PendingSignup).count() == 0
    assert notifier.welcomes == ["bob@example.com"]


def test_verify_with_wrong_code_keeps_pending_row(db, notifier):
    pending, _ = signup(db, notifier)
    wrong = "000000" if pending.otp_code != "000000" else "111111"

    with pytest.raises(InvalidCodeError):
        accounts.verify_otp(db, "bob@example.com", wrong, notifier=notifier)
    assert db.query(PendingSignup).count() == 1


def test_expired_code_discards_pending_signup(db, notifier):
    pending, _ = signup(db, notifier)
    pending.otp_expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    with pytest.raises(ExpiredError):
        accounts.verify_otp(db, "bob@example.com", pending.otp_code, notifier=notifier)
    with pytest.raises(NotFoundError):
        accounts.verify_otp(db, "bob@example.com", "123456", notifier=notifier)


def test_verify_requires_email_and_code(db):
    with pytest.raises(ValidationError):
        accounts.verify_otp(db, "bob@example.com", "")
    with pytest.raises(NotFoundError):
        accounts.verify_otp(db, "nobody@example.com", "123456")


def test_resend_issues_new_expiry(db, notifier):
    pending, _ = signup(db, notifier)
    pending.otp_expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    refreshed, _ = accounts.resend_otp(db, "bob@example.com", notifier=notifier)

    assert refreshed.otp_expires_at > utcnow()
    assert len(notifier.otps) == 2
    account, _ = accounts.verify_otp(db, "bob@example.com", refreshed.otp_code, notifier=notifier)
    assert account.email == "bob@example.com"


def test_resend_without_pending_signup(db, notifier):
    with pytest.raises(NotFoundError):
        accounts.resend_otp(db, "ghost@example.com", notifier=notifier)


def test_purge_removes_only_stale_signups(db, notifier):
    signup(db, notifier)
    signup(db, notifier, username="carol", email="carol@example.com", mobile="+919876511111")
    stale = db.query(PendingSignup).filter(PendingSignup.email == "carol@example.com").one()
    stale.created_at = utcnow() - timedelta(hours=25)
    db.commit()

    assert accounts.purge_stale_pending_signups(db) == 1
    assert [p.email for p in db.query(PendingSignup).all()] == ["bob@example.com"]


def test_login_by_email_or_username(db):
    account = make_account(db)

    logged_in, token = accounts.login(db, "ALICE@example.com", PASSWORD)
    assert logged_in.id == account.id
    assert verify_token(token)["email"] == "alice@example.com"

    logged_in, _ = accounts.login(db, "alice", PASSWORD)
    assert logged_in.id == account.id


def test_login_failures(db):
    make_account(db)
    make_account(db, username="dave", email="dave@example.com", mobile="+919876522222", is_verified=False)

    with pytest.raises(InvalidCredentialsError):
        accounts.login(db, "alice@example.com", "Wrong@1234")
    with pytest.raises(InvalidCredentialsError):
        accounts.login(db, "nobody@example.com", PASSWORD)
    with pytest.raises(UnverifiedAccountError):
        accounts.login(db, "dave@example.com", PASSWORD)
    with pytest.raises(ValidationError):
        accounts.login(db, "alice@example.com", "")


def test_admin_login_requires_admin_role(db):
    make_account(db)
    make_account(db, username="root", email="root@example.com", mobile="+919876533333", role="admin")

    with pytest.raises(InvalidCredentialsError):
        accounts.admin_login(db, "alice@example.com", PASSWORD)
    admin, _ = accounts.admin_login(db, "root@example.com", PASSWORD)
    assert admin.is_admin


def test_update_profile(db):
    account = make_account(db)
    make_account(db, username="erin", email="erin@example.com", mobile="+919876544444")

    with pytest.raises(ConflictError) as excinfo:
        accounts.update_profile(db, account, email="erin@example.com")
    assert excinfo.value.field == "email"

    updated = accounts.update_profile(
        db, account, username="alice2", profile={"first_name": "Alice", "favorite_cuisines": ["Italian"]}
    )
    assert updated.username == "alice2"
    assert updated.first_name == "Alice"
    assert updated.favorite_cuisines == ["Italian"]


def test_update_profile_stores_mobile_without_spaces(db):
    account = make_account(db)
    updated = accounts.update_profile(db, account, mobile="+91 98765 22222")
    assert updated.mobile == "+919876522222"


def test_update_profile_conflict_caught_at_commit(db, monkeypatch):
    account = make_account(db)
    make_account(db, username="erin", email="erin@example.com", mobile="+919876544444")

    monkeypatch.setattr(accounts, "_find_conflict", lambda *args, **kwargs: None)
    with pytest.raises(ConflictError):
        accounts.update_profile(db, account, email="erin@example.com")

    db.refresh(account)
    assert account.email == "alice@example.com"


def test_change_password(db):
    account = make_account(db)

    with pytest.raises(ValidationError):
        accounts.change_password(db, account, "Wrong@1234", "Newpass@123")
    with pytest.raises(ValidationError):
        accounts.change_password(db, account, PASSWORD, "weak")

    accounts.change_password(db, account, PASSWORD, "Newpass@123")
    accounts.login(db, "alice@example.com", "Newpass@123")


def test_addresses_keep_a_single_default(db):
    account = make_account(db)

    addresses = accounts.add_address(db, account, "Home", "1 Main St", "Mumbai", "MH", "400001")
    assert addresses[0].is_default

    accounts.add_address(db, account, "Office", "2 Work Rd", "Mumbai", "MH", "400002")
    addresses = accounts.add_address(db, account, "Gym", "3 Fit Ln", "Mumbai", "MH", "400003", is_default=True)

    assert [a.label for a in addresses] == ["Home", "Office", "Gym"]
    assert [a.label for a in addresses if a.is_default] == ["Gym"]

    with pytest.raises(ValidationError):
        accounts.add_address(db, account, "Empty", "", "Mumbai", "MH", "400004")
