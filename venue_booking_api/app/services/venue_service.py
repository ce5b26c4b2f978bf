"""
Business logic for venues.

Venue names are unique regardless of case.  Public listings only show
active venues; organizers see every venue.  Deleting a venue that
still has bookings is refused.
"""

import logging
import sqlite3
from typing import Optional

from ..core.exceptions import ConflictError, NotFoundError
from ..repositories.venue_repository import VenueRepository
from ..schemas.common import Pagination
from ..schemas.venue import VenueCreate, VenueList, VenueRead, VenueUpdate


logger = logging.getLogger(__name__)


class VenueService:

    @classmethod
    async def create_venue(cls, data: VenueCreate) -> VenueRead:
        name = data.name.strip()
        if VenueRepository.find_by_name(name):
            logger.warning("Venue creation rejected, name taken: %s", name)
            raise ConflictError("Venue name already exists")
        values = data.model_dump()
        values["name"] = name
        try:
            row = VenueRepository.create(values)
        except sqlite3.IntegrityError as exc:
            logger.warning("Venue creation rejected, name taken: %s", name)
            raise ConflictError("Venue name already exists") from exc
        logger.info("Created venue %s (%s)", row["id"], name)
        return VenueRead(**row)

    @classmethod
    async def get_venue(cls, venue_id: int, active_only: bool = False) -> VenueRead:
        """Return a venue or raise ``NotFoundError``.

        With ``active_only`` an inactive venue is reported as missing,
        which is how public routes hide deactivated venues.
        """
        row = VenueRepository.find_by_id(venue_id)
        if not row or (active_only and not row["is_active"]):
            raise NotFoundError("Venue not found")
        return VenueRead(**row)

    @classmethod
    async def list_venues(
        cls,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        min_capacity: Optional[int] = None,
        max_capacity: Optional[int] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        active_only: bool = True,
    ) -> VenueList:
        rows, total = VenueRepository.list(
            page,
            limit,
            search=search.strip() if search else None,
            min_capacity=min_capacity,
            max_capacity=max_capacity,
            min_price=min_price,
            max_price=max_price,
            active_only=active_only,
        )
        return VenueList(
            venues=[VenueRead(**r) for r in rows],
            pagination=Pagination.build(page, limit, total),
        )

    @classmethod
    async def update_venue(cls, venue_id: int, data: VenueUpdate) -> VenueRead:
        if not VenueRepository.find_by_id(venue_id):
            raise NotFoundError("Venue not found")
        values = {k: v for k, v in data.model_dump().items() if v is not None}
        if values.get("name") is not None:
            values["name"] = values["name"].strip()
            if VenueRepository.find_by_name(values["name"], exclude_id=venue_id):
                raise ConflictError("Venue name already exists")
        try:
            row = VenueRepository.update(venue_id, values)
        except sqlite3.IntegrityError as exc:
            raise ConflictError("Venue name already exists") from exc
        logger.info("Updated venue %s: %s", venue_id, sorted(values))
        return VenueRead(**row)

    @classmethod
    async def delete_venue(cls, venue_id: int) -> None:
        if not VenueRepository.find_by_id(venue_id):
            raise NotFoundError("Venue not found")
        try:
            VenueRepository.delete(venue_id)
        except sqlite3.IntegrityError as exc:
            logger.warning("Refusing to delete venue %s with bookings", venue_id)
            raise ConflictError("Cannot delete venue with existing events") from exc
        logger.info("Deleted venue %s", venue_id)
