"""
Organizer (administrator) account endpoints for API v1.

Organizers manage venues, meals and bookings.  Their tokens carry the
``organizer`` role which every ``/admin`` route requires.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from venue_booking_api.app.core.security import ROLE_ORGANIZER, require_roles
from venue_booking_api.app.schemas.account import (
    AccountLogin,
    AccountRead,
    AccountRegister,
    OrganizerAuthResponse,
    PasswordChange,
    ProfileUpdate,
)
from venue_booking_api.app.schemas.common import MessageResponse
from venue_booking_api.app.services.account_service import OrganizerService


router = APIRouter()

require_organizer = require_roles(ROLE_ORGANIZER)


@router.post("/register", response_model=OrganizerAuthResponse, status_code=status.HTTP_201_CREATED)
async def register_organizer(payload: AccountRegister) -> OrganizerAuthResponse:
    organizer, token = await OrganizerService.register(payload)
    return OrganizerAuthResponse(organizer=organizer, token=token)


@router.post("/login", response_model=OrganizerAuthResponse)
async def login_organizer(payload: AccountLogin) -> OrganizerAuthResponse:
    organizer, token = await OrganizerService.login(payload)
    return OrganizerAuthResponse(organizer=organizer, token=token)


@router.get("/profile", response_model=AccountRead)
async def get_profile(current_user: Dict[str, Any] = Depends(require_organizer)) -> AccountRead:
    return await OrganizerService.get_profile(current_user["user_id"])


@router.put("/profile", response_model=AccountRead)
async def update_profile(
    payload: ProfileUpdate,
    current_user: Dict[str, Any] = Depends(require_organizer),
) -> AccountRead:
    """Update the organizer's name and/or phone number."""
    return await OrganizerService.update_profile(current_user["user_id"], payload)


@router.put("/password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    current_user: Dict[str, Any] = Depends(require_organizer),
) -> MessageResponse:
    """Change the organizer's password.

    The current password must be supplied; a wrong one yields 401.
    """
    await OrganizerService.change_password(current_user["user_id"], payload)
    return MessageResponse(message="Password changed successfully")
