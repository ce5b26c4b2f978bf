"""
Venue endpoints for API v1.

``router`` exposes the public catalogue (active venues only) and is
mounted under ``/venues``.  ``admin_router`` holds the organizer
management routes and is mounted under ``/admin/venues``; every route
there requires an organizer token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from venue_booking_api.app.core.security import ROLE_ORGANIZER, require_roles
from venue_booking_api.app.schemas.venue import VenueCreate, VenueList, VenueRead, VenueUpdate
from venue_booking_api.app.services.venue_service import VenueService


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_roles(ROLE_ORGANIZER))])


@router.get("", response_model=VenueList)
async def list_venues(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, description="Match against name, description, address or city"),
    min_capacity: Optional[int] = Query(None, ge=1),
    max_capacity: Optional[int] = Query(None, ge=1),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
) -> VenueList:
    """List active venues, newest first.

    - **page**, **limit**: pagination.
    - **search**: case-insensitive substring search.
    - **min_capacity**, **max_capacity**, **min_price**, **max_price**: range filters.
    """
    return await VenueService.list_venues(
        page=page,
        limit=limit,
        search=search,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        min_price=min_price,
        max_price=max_price,
    )


@router.get("/{venue_id}", response_model=VenueRead)
async def get_venue(venue_id: int) -> VenueRead:
    return await VenueService.get_venue(venue_id, active_only=True)


@admin_router.get("", response_model=VenueList)
async def admin_list_venues(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    min_capacity: Optional[int] = Query(None, ge=1),
    max_capacity: Optional[int] = Query(None, ge=1),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
) -> VenueList:
    """List all venues including deactivated ones."""
    return await VenueService.list_venues(
        page=page,
        limit=limit,
        search=search,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        min_price=min_price,
        max_price=max_price,
        active_only=False,
    )


@admin_router.post("", response_model=VenueRead, status_code=status.HTTP_201_CREATED)
async def create_venue(venue: VenueCreate) -> VenueRead:
    """Create a venue.  Venue names are unique (case-insensitive)."""
    return await VenueService.create_venue(venue)


@admin_router.get("/{venue_id}", response_model=VenueRead)
async def admin_get_venue(venue_id: int) -> VenueRead:
    return await VenueService.get_venue(venue_id)


@admin_router.put("/{venue_id}", response_model=VenueRead)
async def update_venue(venue_id: int, venue: VenueUpdate) -> VenueRead:
    return await VenueService.update_venue(venue_id, venue)


@admin_router.delete("/{venue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_venue(venue_id: int) -> None:
    """Delete a venue.

    Responds 409 while any event still references the venue; deactivate
    it with ``is_active=false`` instead.
    """
    await VenueService.delete_venue(venue_id)
