from pydantic import BaseModel
from typing import Optional


class ClearTransactionsRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
