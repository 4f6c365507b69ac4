from datetime import datetime, timezone
from typing import Any, Dict
import logging

from dankpos.core.exceptions import NotFoundError
from dankpos.database.client import DataClient, eq
from dankpos.modules.sessions.schemas import SessionEnd, SessionStart

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SessionLogService:
    """Login/logout audit rows, always kept in the host database."""

    TABLE = "sessions_log"

    def __init__(self, host_db: DataClient):
        self.db = host_db

    async def start_session(self, data: SessionStart, ip_address: str) -> Dict[str, Any]:
        row = {
            "user_id": data.user_id,
            "shop_id": data.shop_id,
            "device_info": data.device_info,
            "ip_address": ip_address,
            "login_time": _now(),
        }
        rows = await self.db.insert(self.TABLE, [row])
        logger.info(f"Session started for user {data.user_id} on shop {data.shop_id}")
        return rows[0] if rows else row

    async def end_session(self, data: SessionEnd) -> Dict[str, Any]:
        rows = await self.db.update(
            self.TABLE,
            {"logout_time": data.logout_time or _now()},
            filters={"session_id": eq(data.session_id)},
        )
        if not rows:
            raise NotFoundError("Session not found")
        return rows[0]
