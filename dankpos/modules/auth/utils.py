from typing import Any, Dict, Iterable
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

SECRET_FIELDS = ("password", "password_hash")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Unknown hash formats never match."""
    if not plain or not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def strip_secrets(user: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in user.items() if key not in SECRET_FIELDS}


def strip_secrets_many(users: Iterable[Dict[str, Any]]) -> list:
    return [strip_secrets(user) for user in users]
