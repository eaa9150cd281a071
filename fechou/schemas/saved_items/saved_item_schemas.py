from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime


class SavedItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    unit_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class SavedItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    unit_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class SavedItemOut(BaseModel):
    id: int
    name: str
    unit_price: Decimal
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class SavedItemListData(BaseModel):
    total: int
    items: List[SavedItemOut]
