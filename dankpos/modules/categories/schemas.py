from pydantic import BaseModel
from typing import Optional

DEFAULT_ICON = "CircleDashed"


class CategoryCreate(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    icon_name: Optional[str] = None
