"""
Customer authentication endpoints for API v1.

Customers register with name, email and a strong password and receive
a bearer token right away; the same token is returned on login.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from venue_booking_api.app.core.security import ROLE_USER, require_roles
from venue_booking_api.app.schemas.account import AccountLogin, AccountRead, AccountRegister, AuthResponse
from venue_booking_api.app.services.account_service import UserService


router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: AccountRegister) -> AuthResponse:
    """Register a customer account.

    Responds 409 when the email is already registered.
    """
    user, token = await UserService.register(payload)
    return AuthResponse(user=user, token=token)


@router.post("/login", response_model=AuthResponse)
async def login(payload: AccountLogin) -> AuthResponse:
    """Exchange email and password for an access token."""
    user, token = await UserService.login(payload)
    return AuthResponse(user=user, token=token)


@router.get("/me", response_model=AccountRead)
async def me(current_user: Dict[str, Any] = Depends(require_roles(ROLE_USER))) -> AccountRead:
    return await UserService.get_profile(current_user["user_id"])
