# juliecraft/api/endpoints/auth.py
# type: ignore

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from juliecraft.core.config import RESET_CODE_EXPIRE_MINUTES
from juliecraft.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from juliecraft.core.mailer import send_password_reset_email
from juliecraft.core.permissions import (
    AdminLevel,
    AuthenticatedCaller,
    Authorized,
    check_admin_capability,
)
from juliecraft.core.security import (
    create_access_token,
    decode_token,
    generate_reset_code,
    get_password_hash,
    verify_password,
)
from juliecraft.database import get_db
from juliecraft.models.auth import Profile, PasswordResetToken, ROLE_CUSTOMER, STATUS_INACTIVE
from juliecraft.schemas.auth import (
    AuthResponse,
    LoginRequest,
    MessageResponse,
    PasswordResetChange,
    PasswordResetRequest,
    PasswordResetVerify,
    ProfileOut,
    RegisterRequest,
    VerifyResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Missing or non-Bearer headers come through as None
bearer_scheme = HTTPBearer(auto_error=False)

RESET_CODE_RE = re.compile(r"^\d{6}$")
MIN_PASSWORD_LENGTH = 6


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ***************************************************************
# Dependencies: resolve the authenticated caller
# ***************************************************************

def _profile_from_token(db: Session, token: str) -> Profile:
    """Decodes the token and loads its profile. Raises AuthenticationError."""
    token_data = decode_token(token)
    if token_data.sub is None:
        raise AuthenticationError("Invalid token")
    try:
        profile_id = UUID(token_data.sub)
    except ValueError as e:
        raise AuthenticationError("Invalid token") from e

    profile = db.get(Profile, profile_id)
    if profile is None:
        raise AuthenticationError("Invalid token")
    return profile


def get_current_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedCaller:
    """Verifies the bearer token and returns who is calling (401 otherwise)."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Unauthorized")

    profile = _profile_from_token(db, credentials.credentials)
    return AuthenticatedCaller.from_profile(profile)


def get_optional_user(
    db: Session = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthenticatedCaller]:
    """Like get_current_user, but anonymous or bad credentials give None."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        profile = _profile_from_token(db, credentials.credentials)
    except AuthenticationError:
        logger.info("Ignoring invalid bearer token on optional-auth endpoint")
        return None
    return AuthenticatedCaller.from_profile(profile)


def require_admin(
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
) -> Authorized:
    """Requires the admin capability. The profile is re-read on every request."""
    capability = check_admin_capability(db.get(Profile, caller.id))
    if not isinstance(capability, Authorized):
        logger.info("Admin access denied for %s: %s", caller.email, capability.reason)
        raise AuthorizationError("Forbidden - Admin access required")
    return capability


def require_super_admin(admin: Authorized = Depends(require_admin)) -> Authorized:
    """Requires the super admin level on top of the admin capability."""
    if admin.level < AdminLevel.SUPER_ADMIN:
        raise AuthorizationError("Forbidden - Super admin access required")
    return admin


# ***************************************************************
# 1. Register
# ***************************************************************
@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: RegisterRequest, db: Session = Depends(get_db)):
    """Creates a customer profile and returns a token for it."""
    if len(user_in.password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long")

    email = user_in.email.lower()
    if db.query(Profile).filter(Profile.email == email).first():
        raise ConflictError("An account with this email already exists")

    first_name, _, last_name = user_in.name.strip().partition(" ")
    profile = Profile(
        email=email,
        password_hash=get_password_hash(user_in.password),
        first_name=first_name,
        last_name=last_name.strip(),
        phone=user_in.phone,
        is_admin=False,
        role=ROLE_CUSTOMER,
        preferences={"sms": False, "push": True, "email": True, "marketing": True},
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)

    logger.info("Registered new customer %s", email)
    token = create_access_token(profile.id, email=profile.email, role=profile.role)
    return {
        "message": "Account created successfully",
        "user": ProfileOut.model_validate(profile),
        "token": token,
    }


# ***************************************************************
# 2. Login
# ***************************************************************
@router.post("/login", response_model=AuthResponse)
def login(user_in: LoginRequest, db: Session = Depends(get_db)):
    """Checks email and password and returns a token. Never says which one was wrong."""
    profile = db.query(Profile).filter(Profile.email == user_in.email.lower()).first()

    if not profile or not verify_password(user_in.password, profile.password_hash):
        raise AuthenticationError("Invalid email or password")

    if profile.status == STATUS_INACTIVE:
        raise AuthorizationError("Account is deactivated")

    profile.last_login = datetime.now(timezone.utc)
    db.commit()
    db.refresh(profile)

    logger.info("User %s logged in", profile.email)
    token = create_access_token(profile.id, email=profile.email, role=profile.role)
    return {
        "message": "Login successful",
        "user": ProfileOut.model_validate(profile),
        "token": token,
    }


# ***************************************************************
# 3. Logout
# ***************************************************************
@router.post("/logout", response_model=MessageResponse)
def logout(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)):
    """
    Always succeeds. Tokens are stateless, so the client dropping it is the
    logout; a presented token is only decoded to log who left.
    """
    if credentials is not None:
        try:
            token_data = decode_token(credentials.credentials)
            logger.info("User %s logged out", token_data.email or token_data.sub)
        except AuthenticationError:
            logger.info("Logout with an invalid or expired token")

    return {"success": True, "message": "Logged out successfully"}


# ***************************************************************
# 4. Verify the current token
# ***************************************************************
@router.get("/verify", response_model=VerifyResponse)
def verify(
    db: Session = Depends(get_db),
    caller: AuthenticatedCaller = Depends(get_current_user),
):
    """Returns the profile behind a valid token."""
    profile = db.get(Profile, caller.id)
    return {"valid": True, "user": ProfileOut.model_validate(profile)}


# ***************************************************************
# 5. Password reset
# ***************************************************************

def _check_code_format(code: str) -> None:
    if not RESET_CODE_RE.match(code):
        raise ValidationError("Invalid reset code format. Code must be 6 digits.")


def _find_reset_token(
    db: Session, code: str, email: str, token_id: Optional[UUID] = None
) -> PasswordResetToken:
    """Finds an unused, unexpired reset code for this email."""
    query = db.query(PasswordResetToken).filter(
        PasswordResetToken.token == code,
        PasswordResetToken.email == email,
        PasswordResetToken.used_at.is_(None),
    )
    if token_id is not None:
        query = query.filter(PasswordResetToken.id == token_id)

    reset_token = query.order_by(PasswordResetToken.created_at.desc()).first()
    if reset_token is None:
        raise ValidationError("Invalid or expired reset code")

    if _as_utc(reset_token.expires_at) < datetime.now(timezone.utc):
        raise ValidationError("Reset code has expired. Please request a new one.")

    if reset_token.profile is None:
        raise NotFoundError("User not found")
    if reset_token.profile.email.lower() != email:
        raise ValidationError("Invalid reset code")

    return reset_token


@router.post("/password-reset/request", response_model=MessageResponse)
def request_password_reset(body: PasswordResetRequest, db: Session = Depends(get_db)):
    """Issues a fresh six digit code and mails it; older unused codes stop working."""
    email = body.email.lower()
    profile = db.query(Profile).filter(Profile.email == email).first()
    if profile is None:
        raise NotFoundError(
            "No account found with this email address. Please check your email and try again.",
            extra={"code": "EMAIL_NOT_FOUND"},
        )

    now = datetime.now(timezone.utc)
    db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == profile.id,
        PasswordResetToken.used_at.is_(None),
    ).update({PasswordResetToken.used_at: now}, synchronize_session=False)

    code = generate_reset_code()
    db.add(PasswordResetToken(
        user_id=profile.id,
        email=email,
        token=code,
        expires_at=now + timedelta(minutes=RESET_CODE_EXPIRE_MINUTES),
    ))
    db.commit()
    logger.info("Password reset code issued for %s", email)

    if not send_password_reset_email(email, profile.full_name or "User", code):
        logger.warning("Password reset email for %s was not sent; the code is still valid", email)

    return {"success": True, "message": "Password reset code has been sent to your email address."}


@router.post("/password-reset/verify")
def verify_password_reset(body: PasswordResetVerify, db: Session = Depends(get_db)):
    """Checks a code without using it up."""
    _check_code_format(body.code)
    reset_token = _find_reset_token(db, body.code, body.email.lower())
    return {"valid": True, "message": "Reset code verified", "tokenId": str(reset_token.id)}


@router.post("/password-reset/change", response_model=MessageResponse)
def change_password(body: PasswordResetChange, db: Session = Depends(get_db)):
    """Sets the new password and burns every outstanding code of the user."""
    _check_code_format(body.code)
    if len(body.new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError("Password must be at least 6 characters long")

    reset_token = _find_reset_token(db, body.code, body.email.lower(), body.token_id)
    profile = reset_token.profile

    now = datetime.now(timezone.utc)
    profile.password_hash = get_password_hash(body.new_password)
    reset_token.used_at = now
    db.query(PasswordResetToken).filter(
        PasswordResetToken.user_id == profile.id,
        PasswordResetToken.used_at.is_(None),
        PasswordResetToken.id != reset_token.id,
    ).update({PasswordResetToken.used_at: now}, synchronize_session=False)
    db.commit()

    logger.info("Password changed through reset code for %s", profile.email)
    return {"success": True, "message": "Password reset successfully"}
