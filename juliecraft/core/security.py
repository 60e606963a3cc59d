# juliecraft/core/security.py
# type: ignore
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union

from jose import jwt, JWTError
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError as PydanticValidationError

from juliecraft.core.config import JWT_SECRET, JWT_ALGORITHM, ACCESS_TOKEN_EXPIRE_DAYS
from juliecraft.core.errors import AuthenticationError

# ***************************************************************
# 1. Security settings
# ***************************************************************

# Password hashing context (pbkdf2_sha256)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


class TokenPayload(BaseModel):
    """Claims carried by an access token."""
    sub: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    exp: Optional[int] = None


# ***************************************************************
# 2. Password hashing
# ***************************************************************

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Checks a plain-text password against its stored hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Hashes a plain-text password."""
    return pwd_context.hash(password)


# ***************************************************************
# 3. JWT creation and verification
# ***************************************************************

def create_access_token(
    subject: Union[str, Any],
    email: Optional[str] = None,
    role: Optional[str] = None,
    expires_delta: timedelta = None,
) -> str:
    """Creates a signed access token for the given profile id."""
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {"exp": expire, "sub": str(subject)}
    if email is not None:
        to_encode["email"] = email
    if role is not None:
        to_encode["role"] = role

    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_token(token: str) -> TokenPayload:
    """Decodes and validates a token. Raises AuthenticationError on any failure."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return TokenPayload(**payload)
    except (JWTError, PydanticValidationError, TypeError) as e:
        raise AuthenticationError("Invalid token") from e


# ***************************************************************
# 4. Password reset codes
# ***************************************************************

def generate_reset_code() -> str:
    """Six digit numeric code, never starting with 0."""
    return str(100000 + secrets.randbelow(900000))
