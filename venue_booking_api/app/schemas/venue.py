"""
Pydantic models for venue data.

``VenueBase`` holds the descriptive fields shared by create and read
models.  ``VenueUpdate`` makes every field optional so organizers can
patch a venue partially.  Pricing is per day.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Pagination


class VenueBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=150, examples=["Grand Ballroom"])
    description: Optional[str] = Field(None, max_length=2000, examples=["Elegant hall for weddings"])
    address: Optional[str] = Field(None, min_length=5, max_length=500, examples=["12 Gulshan Avenue"])
    city: Optional[str] = Field(None, max_length=100, examples=["Dhaka"])
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: str = Field("Bangladesh", max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    capacity: Optional[int] = Field(None, ge=1, le=10000, examples=[300])
    area: Optional[float] = Field(None, ge=0, description="Floor area in square feet")
    venue_type: Optional[str] = Field(None, max_length=50, examples=["banquet_hall"])
    price_per_day: float = Field(..., ge=0, le=9_999_999.99, examples=[50000.0])
    minimum_days: int = Field(1, ge=1)
    security_deposit: Optional[float] = Field(None, ge=0)
    facilities: List[str] = Field(default_factory=list, examples=[["parking", "stage"]])
    amenities: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    catering_allowed: bool = True
    decoration_allowed: bool = True
    alcohol_allowed: bool = False
    smoking_allowed: bool = False
    pet_friendly: bool = False
    contact_person: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, max_length=30)
    contact_email: Optional[str] = Field(None, max_length=255)
    is_active: bool = True


class VenueCreate(VenueBase):
    """Schema for creating a venue."""
    pass


class VenueUpdate(BaseModel):
    """Schema for updating a venue; only provided fields are written."""

    name: Optional[str] = Field(None, min_length=2, max_length=150)
    description: Optional[str] = Field(None, max_length=2000)
    address: Optional[str] = Field(None, min_length=5, max_length=500)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    capacity: Optional[int] = Field(None, ge=1, le=10000)
    area: Optional[float] = Field(None, ge=0)
    venue_type: Optional[str] = Field(None, max_length=50)
    price_per_day: Optional[float] = Field(None, ge=0, le=9_999_999.99)
    minimum_days: Optional[int] = Field(None, ge=1)
    security_deposit: Optional[float] = Field(None, ge=0)
    facilities: Optional[List[str]] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    catering_allowed: Optional[bool] = None
    decoration_allowed: Optional[bool] = None
    alcohol_allowed: Optional[bool] = None
    smoking_allowed: Optional[bool] = None
    pet_friendly: Optional[bool] = None
    contact_person: Optional[str] = Field(None, max_length=100)
    contact_phone: Optional[str] = Field(None, max_length=30)
    contact_email: Optional[str] = Field(None, max_length=255)
    is_active: Optional[bool] = None


class VenueRead(VenueBase):
    """Schema for reading a venue from the API."""

    id: int
    rating: Optional[float] = None
    total_reviews: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class VenueList(BaseModel):
    venues: List[VenueRead]
    pagination: Pagination
