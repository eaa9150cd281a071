from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime


class UserActivityOut(BaseModel):
    id: int
    user_id: Optional[int]
    username_snapshot: str
    action: str
    category: str
    message: str
    details: Optional[dict]
    created_at: datetime

    class Config:
        from_attributes = True


class UserActivityFilters(BaseModel):
    user_id: Optional[int] = None
    username: Optional[str] = None
    category: Optional[str] = None

    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=100)

    sort_by: Literal["created_at", "username"] = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"


class UserActivityListData(BaseModel):
    total: int
    items: List[UserActivityOut]
