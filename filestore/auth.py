"""Authentication and security utilities."""

import base64
import binascii
import hashlib
import hmac
import re
import uuid
from typing import Optional, Tuple

import bcrypt

from filestore.exceptions import UnauthorizedError

_LEGACY_SHA1_HASH = re.compile(r'^[0-9a-f]{40}$')


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash

    Returns:
        Bcrypt hash of the password
    """
    password_bytes = password.encode('utf-8')
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a stored hash.

    Bcrypt hashes are checked with bcrypt. Unsalted SHA-1 hex digests, the
    format written by the previous user store, are compared in constant time.

    Args:
        password: Plain text password to verify
        password_hash: Stored hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    password_bytes = password.encode('utf-8')

    if _LEGACY_SHA1_HASH.match(password_hash):
        digest = hashlib.sha1(password_bytes).hexdigest()
        return hmac.compare_digest(digest, password_hash)

    try:
        return bcrypt.checkpw(password_bytes, password_hash.encode('utf-8'))
    except ValueError:
        return False


def generate_token() -> str:
    """
    Generate a new opaque session token.

    Returns:
        uuid4 string
    """
    return str(uuid.uuid4())


def parse_basic_credentials(authorization: Optional[str]) -> Tuple[str, str]:
    """
    Decode a Basic Authorization header value into (email, password).

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    if not authorization or not authorization.startswith("Basic "):
        raise UnauthorizedError()

    encoded = authorization[len("Basic "):].strip()
    try:
        decoded = base64.b64decode(encoded, validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        raise UnauthorizedError()

    email, separator, password = decoded.partition(':')
    if not separator or not email or not password:
        raise UnauthorizedError()

    return email, password


def extract_token(x_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """
    Pick the session token from the X-Token header, or from a Bearer
    Authorization header when X-Token is absent.
    """
    if x_token:
        return x_token
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):].strip()
        return token or None
    return None
