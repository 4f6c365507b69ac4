from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


class SessionStart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(default=None, alias="userId")
    shop_id: Optional[str] = Field(default=None, alias="shopId")
    device_info: Optional[Any] = Field(default=None, alias="deviceInfo")


class SessionEnd(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    logout_time: Optional[str] = Field(default=None, alias="logoutTime")
