from typing import Any, Dict, Optional, Tuple
import logging

from dankpos.core.exceptions import AuthenticationError, BackendError, NotFoundError, ValidationError
from dankpos.database.client import DataClient, eq
from dankpos.database.resolver import TenantCredentials, issue_credentials
from dankpos.modules.auth.schemas import LoginRequest
from dankpos.modules.auth.utils import strip_secrets, verify_password

logger = logging.getLogger(__name__)

INVALID_UID = "Invalid NFC UID."
INVALID_USERNAME_PASSWORD = "Invalid username or password."


class AuthService:
    """Login against the host database and hand out the shop's credentials."""

    def __init__(self, host_db: DataClient):
        self.host_db = host_db

    async def _find_user(self, column: str, value: str) -> Optional[Dict[str, Any]]:
        try:
            rows = await self.host_db.select("admin_users", filters={column: eq(value)}, limit=1)
        except BackendError:
            logger.error("Host database error during user fetch for login")
            raise
        return rows[0] if rows else None

    async def authenticate(self, data: LoginRequest) -> Dict[str, Any]:
        """
        Validate the caller's identity.

        NFC login trusts the card uid alone. Username login compares the
        password against the stored bcrypt hash. Unknown users and wrong
        passwords produce the same message.
        """
        if data.uid:
            user = await self._find_user("uid", data.uid)
            if not user:
                raise AuthenticationError(INVALID_UID)
            return user

        if data.username and data.password:
            user = await self._find_user("username", data.username)
            if not user or not verify_password(data.password, user.get("password_hash")):
                raise AuthenticationError(INVALID_USERNAME_PASSWORD)
            return user

        raise ValidationError("NFC UID or Username and Password are required for login.")

    async def login(self, data: LoginRequest) -> Tuple[Dict[str, Any], TenantCredentials]:
        user = await self.authenticate(data)

        try:
            credentials = await issue_credentials(user.get("shop_id"), self.host_db)
        except NotFoundError:
            logger.warning(f"User {user.get('id')} has no shop configured")
            raise
        except BackendError as e:
            raise BackendError("Failed to retrieve shop details.") from e

        logger.info(f"User {user.get('id')} logged in to shop {user.get('shop_id')}")
        return strip_secrets(user), credentials
