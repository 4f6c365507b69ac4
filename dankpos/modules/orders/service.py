from datetime import datetime, timezone
from typing import Any, Dict, List
from uuid import uuid4
import json
import logging
import math

from dankpos.core.exceptions import ValidationError
from dankpos.database.client import DataClient, eq
from dankpos.modules.orders.schemas import OrderCreate, OrderStatus

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Member UID, dealer ID, items, and total price are required for an order."


def parse_items(value: Any) -> Any:
    """items_json is stored as JSON; the kiosk sometimes sends it pre-serialized."""
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            raise ValidationError("items_json must be valid JSON.")
    return value


def parse_price(value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError):
        return math.nan
    return price


class OrderService:
    TABLE = "orders"

    def __init__(self, db: DataClient):
        self.db = db

    async def list_orders(self) -> List[Dict[str, Any]]:
        return await self.db.select(self.TABLE)

    async def create_order(self, data: OrderCreate) -> Dict[str, Any]:
        items = parse_items(data.items_json)
        total_price = parse_price(data.total_price)

        if not data.member_uid or not data.dealer_id or not items or math.isnan(total_price):
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        order = {
            "id": data.id or str(uuid4()),
            "member_uid": data.member_uid,
            "dealer_id": data.dealer_id,
            "items_json": items,
            "total_price": total_price,
            "comment": data.comment,
            "status": (data.status or OrderStatus.PENDING).value,
            "created_at": data.created_at or datetime.now(timezone.utc).isoformat(),
        }
        rows = await self.db.insert(self.TABLE, [order])
        return rows[0] if rows else order

    async def update_orders(self, payload: Any) -> List[Dict[str, Any]]:
        """
        Apply a batch of partial updates. Entries without an id are skipped;
        the rows the database returns are collected in order.
        """
        if not isinstance(payload, list) or not payload:
            raise ValidationError("An array of orders is required for PUT operation.")

        updated: List[Dict[str, Any]] = []
        for entry in payload:
            if not isinstance(entry, dict) or not entry.get("id"):
                logger.debug("Skipping order update without id")
                continue
            fields = {key: value for key, value in entry.items() if key != "id"}
            if "items_json" in fields:
                fields["items_json"] = parse_items(fields["items_json"])

            rows = await self.db.update(self.TABLE, fields, filters={"id": eq(entry["id"])})
            if rows:
                updated.append(rows[0])
        return updated
