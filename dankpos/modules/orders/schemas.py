from pydantic import BaseModel, ConfigDict
from typing import Any, List, Optional, Union
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"


class OrderCreate(BaseModel):
    """Kiosk order as posted by the ordering screen. items_json may arrive as a JSON string."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    member_uid: Optional[str] = None
    dealer_id: Optional[str] = None
    items_json: Optional[Union[str, List[Any]]] = None
    total_price: Optional[Union[float, str]] = None
    comment: Optional[str] = None
    status: Optional[OrderStatus] = None
    created_at: Optional[str] = None
