from typing import Any, Dict, List, Optional
import logging

from dankpos.core.exceptions import ValidationError
from dankpos.database.client import DataClient, eq
from dankpos.modules.categories.schemas import CategoryCreate, DEFAULT_ICON

logger = logging.getLogger(__name__)


class CategoryService:
    """Menu categories shown on the PoS and the kiosk."""

    TABLE = "categories"

    def __init__(self, db: DataClient):
        self.db = db

    async def list_categories(self) -> List[Dict[str, Any]]:
        return await self.db.select(self.TABLE)

    async def create_category(self, data: CategoryCreate) -> Dict[str, Any]:
        if not data.name or not data.name.strip():
            raise ValidationError("Category name is required")

        category = data.model_dump(exclude_none=True)
        category["name"] = data.name.strip()
        category["icon_name"] = data.icon_name or DEFAULT_ICON

        rows = await self.db.insert(self.TABLE, [category])
        return rows[0] if rows else category

    async def delete_category(self, category_id: Optional[str]) -> Dict[str, str]:
        if not category_id:
            raise ValidationError("Category ID is required")
        await self.db.delete(self.TABLE, filters={"id": eq(category_id)})
        logger.info(f"Category {category_id} deleted")
        return {"message": "Category deleted successfully"}
