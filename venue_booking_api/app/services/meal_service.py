"""Business logic for catering meals."""

import logging
import sqlite3
from typing import Optional

from ..core.exceptions import ConflictError, NotFoundError
from ..repositories.meal_repository import MealRepository
from ..schemas.common import Pagination
from ..schemas.meal import MealCreate, MealList, MealRead, MealUpdate


logger = logging.getLogger(__name__)


class MealService:

    @classmethod
    async def create_meal(cls, data: MealCreate) -> MealRead:
        values = data.model_dump()
        values["name"] = values["name"].strip()
        row = MealRepository.create(values)
        logger.info("Created meal %s (%s)", row["id"], row["name"])
        return MealRead(**row)

    @classmethod
    async def get_meal(cls, meal_id: int, active_only: bool = False) -> MealRead:
        row = MealRepository.find_by_id(meal_id)
        if not row or (active_only and not row["is_active"]):
            raise NotFoundError("Meal not found")
        return MealRead(**row)

    @classmethod
    async def list_meals(
        cls,
        page: int = 1,
        limit: int = 10,
        meal_type: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        active_only: bool = True,
    ) -> MealList:
        rows, total = MealRepository.list(
            page,
            limit,
            meal_type=meal_type,
            search=search.strip() if search else None,
            min_price=min_price,
            max_price=max_price,
            active_only=active_only,
        )
        return MealList(meals=[MealRead(**r) for r in rows], pagination=Pagination.build(page, limit, total))

    @classmethod
    async def update_meal(cls, meal_id: int, data: MealUpdate) -> MealRead:
        if not MealRepository.find_by_id(meal_id):
            raise NotFoundError("Meal not found")
        values = {k: v for k, v in data.model_dump().items() if v is not None}
        if values.get("name") is not None:
            values["name"] = values["name"].strip()
        row = MealRepository.update(meal_id, values)
        logger.info("Updated meal %s: %s", meal_id, sorted(values))
        return MealRead(**row)

    @classmethod
    async def delete_meal(cls, meal_id: int) -> None:
        if not MealRepository.find_by_id(meal_id):
            raise NotFoundError("Meal not found")
        try:
            MealRepository.delete(meal_id)
        except sqlite3.IntegrityError as exc:
            logger.warning("Refusing to delete meal %s used by events", meal_id)
            raise ConflictError(
                "Cannot delete meal that is currently selected for existing events. "
                "Please remove it from events first."
            ) from exc
        logger.info("Deleted meal %s", meal_id)
