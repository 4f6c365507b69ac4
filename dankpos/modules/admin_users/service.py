from typing import Any, Dict, List
from uuid import uuid4
import logging

from dankpos.core.exceptions import ValidationError
from dankpos.database.client import DataClient
from dankpos.modules.admin_users.schemas import AdminRole, AdminUserCreate
from dankpos.modules.auth.utils import hash_password, strip_secrets, strip_secrets_many

logger = logging.getLogger(__name__)


def _hash_plain_password(user: Dict[str, Any]) -> Dict[str, Any]:
    """Plain passwords never reach the database; only the bcrypt hash does."""
    user = dict(user)
    password = user.pop("password", None)
    if password:
        user["password_hash"] = hash_password(password)
    return user


class AdminUserService:
    """Staff accounts of a shop (NFC card and/or username login)."""

    TABLE = "admin_users"

    def __init__(self, db: DataClient):
        self.db = db

    async def list_users(self) -> List[Dict[str, Any]]:
        return strip_secrets_many(await self.db.select(self.TABLE))

    async def create_user(self, data: AdminUserCreate) -> Dict[str, Any]:
        if not data.username and not data.uid:
            raise ValidationError("Username or UID is required.")
        if data.username and not data.password:
            raise ValidationError("Password is required for username-based login.")

        user = data.model_dump(exclude_none=True)
        user["id"] = data.id or str(uuid4())
        user["role"] = (data.role or AdminRole.STAFF).value
        user = _hash_plain_password(user)

        rows = await self.db.insert(self.TABLE, [user])
        logger.info(f"Admin user {user['id']} created with role {user['role']}")
        return strip_secrets(rows[0] if rows else user)

    async def upsert_users(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, list) or not payload:
            raise ValidationError("An array of admin users is required for PUT operation.")
        if not all(isinstance(user, dict) for user in payload):
            raise ValidationError("Every admin user must be an object.")

        users = [_hash_plain_password(user) for user in payload]
        rows = await self.db.upsert(self.TABLE, users, on_conflict="id")
        return strip_secrets_many(rows)
