"""
Catering meal endpoints for API v1.

Mirrors the venue routes: a public catalogue under ``/meals`` and
organizer management under ``/admin/meals``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from venue_booking_api.app.core.security import ROLE_ORGANIZER, require_roles
from venue_booking_api.app.schemas.meal import MealCreate, MealList, MealRead, MealType, MealUpdate
from venue_booking_api.app.services.meal_service import MealService


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_roles(ROLE_ORGANIZER))])


@router.get("", response_model=MealList)
async def list_meals(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[MealType] = Query(None, description="veg, nonveg or buffet"),
    search: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
) -> MealList:
    return await MealService.list_meals(
        page=page,
        limit=limit,
        meal_type=type,
        search=search,
        min_price=min_price,
        max_price=max_price,
    )


@router.get("/{meal_id}", response_model=MealRead)
async def get_meal(meal_id: int) -> MealRead:
    return await MealService.get_meal(meal_id, active_only=True)


@admin_router.get("", response_model=MealList)
async def admin_list_meals(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[MealType] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
) -> MealList:
    return await MealService.list_meals(
        page=page,
        limit=limit,
        meal_type=type,
        search=search,
        min_price=min_price,
        max_price=max_price,
        active_only=False,
    )


@admin_router.post("", response_model=MealRead, status_code=status.HTTP_201_CREATED)
async def create_meal(meal: MealCreate) -> MealRead:
    return await MealService.create_meal(meal)


@admin_router.get("/{meal_id}", response_model=MealRead)
async def admin_get_meal(meal_id: int) -> MealRead:
    return await MealService.get_meal(meal_id)


@admin_router.put("/{meal_id}", response_model=MealRead)
async def update_meal(meal_id: int, meal: MealUpdate) -> MealRead:
    return await MealService.update_meal(meal_id, meal)


@admin_router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(meal_id: int) -> None:
    """Delete a meal; 409 while bookings still reference it."""
    await MealService.delete_meal(meal_id)
