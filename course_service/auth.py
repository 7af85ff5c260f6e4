import base64
import binascii
from typing import Optional, Tuple

from passlib.context import CryptContext

# Password hashing - lazily initialized, pbkdf2 keeps passlib off the bcrypt backend
_pwd_context = None


def get_pwd_context() -> CryptContext:
    """Get password context, initializing it lazily"""
    global _pwd_context
    if _pwd_context is None:
        _pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
    return _pwd_context


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return get_pwd_context().verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password"""
    return get_pwd_context().hash(password)


def parse_basic_authorization(header: Optional[str]) -> Optional[Tuple[str, str]]:
    """Decode an ``Authorization: Basic <base64(username:password)>`` header.

    Returns ``None`` when the header is missing, uses another scheme, or does
    not decode to a ``username:password`` pair.
    """
    if not header:
        return None
    scheme, _, param = header.strip().partition(" ")
    if scheme.lower() != "basic" or not param.strip():
        return None
    try:
        decoded = base64.b64decode(param.strip(), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    username, separator, password = decoded.partition(":")
    if not separator:
        return None
    return username, password


class BasicAuthenticator:
    """Checks Basic credentials against the single configured account.

    The username is matched case-insensitively, the password exactly.
    """

    def __init__(self, username: str, password: str):
        self.users_db = {
            username.casefold(): {
                "username": username,
                "hashed_password": get_password_hash(password),
            }
        }

    def authenticate_user(self, username: str, password: str) -> Optional[dict]:
        """Authenticate a user and return user info if valid"""
        user = self.users_db.get(username.casefold())
        if not user:
            return None
        if not verify_password(password, user["hashed_password"]):
            return None
        return {"username": user["username"]}

    def authenticate_header(self, header: Optional[str]) -> Optional[dict]:
        credentials = parse_basic_authorization(header)
        if credentials is None:
            return None
        return self.authenticate_user(*credentials)
