"""Pydantic models for catering meals."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .common import Pagination


MealType = Literal["veg", "nonveg", "buffet"]


class MealBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, examples=["Royal Buffet"])
    description: Optional[str] = Field(None, max_length=1000)
    type: MealType = Field(..., examples=["buffet"])
    cuisine: Optional[str] = Field(None, max_length=50, examples=["bengali"])
    serving_style: Optional[str] = Field(None, max_length=50, examples=["buffet"])
    price_per_person: float = Field(..., ge=0, le=99_999.99, examples=[850.0])
    minimum_guests: int = Field(1, ge=1, le=10000)
    special_dietary: List[str] = Field(default_factory=list, examples=[["halal"]])
    beverages: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    staff_included: bool = False
    equipment_included: bool = False
    is_active: bool = True
    is_popular: bool = False


class MealCreate(MealBase):
    """Schema for creating a meal."""
    pass


class MealUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    type: Optional[MealType] = None
    cuisine: Optional[str] = Field(None, max_length=50)
    serving_style: Optional[str] = Field(None, max_length=50)
    price_per_person: Optional[float] = Field(None, ge=0, le=99_999.99)
    minimum_guests: Optional[int] = Field(None, ge=1, le=10000)
    special_dietary: Optional[List[str]] = None
    beverages: Optional[List[str]] = None
    images: Optional[List[str]] = None
    staff_included: Optional[bool] = None
    equipment_included: Optional[bool] = None
    is_active: Optional[bool] = None
    is_popular: Optional[bool] = None


class MealRead(MealBase):
    id: int
    rating: Optional[float] = None
    total_reviews: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class MealList(BaseModel):
    meals: List[MealRead]
    pagination: Pagination
