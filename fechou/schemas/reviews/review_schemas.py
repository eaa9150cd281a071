from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ReviewCreate(BaseModel):
    quote_number: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewRespond(BaseModel):
    response: str = Field(..., min_length=1, max_length=2000)


class ReviewClientOut(BaseModel):
    id: int
    name: str


class ReviewOut(BaseModel):
    id: int
    quote_id: Optional[int]
    rating: int
    comment: Optional[str]
    is_public: bool
    response: Optional[str]
    responded_at: Optional[datetime]
    created_at: datetime
    client: Optional[ReviewClientOut] = None


class ReviewListData(BaseModel):
    total: int
    average_rating: float
    items: List[ReviewOut]


class ReviewExistsOut(BaseModel):
    exists: bool
