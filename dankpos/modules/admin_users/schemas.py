from pydantic import BaseModel, ConfigDict
from typing import Optional
from enum import Enum


class AdminRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"


class AdminUserCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    uid: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    role: Optional[AdminRole] = None
    shop_id: Optional[str] = None
