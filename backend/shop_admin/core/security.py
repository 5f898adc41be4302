from datetime import datetime, timedelta, timezone
from typing import Any, Union, Optional
import secrets

from jose import jwt, JWTError
from passlib.context import CryptContext

from shop_admin.core.config import settings
from shop_admin.schemas.admin import TokenPayload

# Configure passlib for password hashing (bcrypt is a good default)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = settings.ALGORITHM
SECRET_KEY = settings.SECRET_KEY
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

def create_access_token(
    subject: Union[str, Any], role: str = "admin", expires_delta: Optional[timedelta] = None
) -> str:
    """
    Creates a new JWT access token.
    'subject' is the account ID, 'role' is checked by the admin dependencies.
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode = {"exp": expire, "sub": str(subject), "role": role}
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    Verifies a plain password against a hashed password.
    """
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """
    Hashes a plain password.
    """
    return pwd_context.hash(password)

def decode_token(token: str) -> Optional[TokenPayload]:
    """
    Decodes a JWT token and returns the payload if valid.
    Returns None if the token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return TokenPayload.model_validate(payload)
    except JWTError: # Covers various errors like invalid signature, expired token
        return None
    except ValueError: # Payload does not match TokenPayload
        return None

def generate_reset_token() -> str:
    """64 hex chars, used in the password reset link."""
    return secrets.token_hex(32)

def generate_otp() -> str:
    """Six digit numeric one-time code."""
    return str(100000 + secrets.randbelow(900000))
