from typing import Any, Dict, List
import logging

from dankpos.database.client import DataClient, eq

logger = logging.getLogger(__name__)


class MemberService:
    """Club members, identified at the counter by their card uid."""

    TABLE = "members"

    def __init__(self, db: DataClient):
        self.db = db

    async def list_members(self) -> List[Dict[str, Any]]:
        return await self.db.select(self.TABLE, order="card_number.asc")

    async def delete_member(self, member_id: str) -> Dict[str, str]:
        await self.db.delete(self.TABLE, filters={"id": eq(member_id)})
        logger.info(f"Member {member_id} deleted")
        return {"message": "Member deleted successfully"}
