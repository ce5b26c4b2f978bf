"""
Business logic for customer and organizer accounts.

Customers and organizers authenticate the same way but live in
separate tables and receive tokens with different roles.
``AccountService`` implements the shared flows and is specialised by
``UserService`` and ``OrganizerService``.
"""

import logging
import sqlite3
from typing import Type

from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from ..core.security import (
    ROLE_ORGANIZER,
    ROLE_USER,
    create_principal_token,
    hash_password,
    verify_password,
)
from ..repositories.account_repository import AccountRepository, OrganizerRepository, UserRepository
from ..schemas.account import AccountLogin, AccountRead, AccountRegister, PasswordChange, ProfileUpdate


logger = logging.getLogger(__name__)


class AccountService:
    repository: Type[AccountRepository] = AccountRepository
    role: str = ""

    @classmethod
    async def register(cls, data: AccountRegister) -> tuple[AccountRead, str]:
        """Create an account and return it together with an access token.

        Raises ``ConflictError`` when the email is already registered.
        """
        if cls.repository.find_by_email(data.email):
            logger.warning("Registration rejected for existing %s email %s", cls.role, data.email)
            raise ConflictError("An account with this email already exists")
        try:
            row = cls.repository.create(
                name=data.name,
                email=data.email,
                password_hash=hash_password(data.password),
                phone=data.phone,
            )
        except sqlite3.IntegrityError as exc:
            # A concurrent registration won the race to the unique index.
            logger.warning("Registration rejected for existing %s email %s", cls.role, data.email)
            raise ConflictError("An account with this email already exists") from exc
        logger.info("Registered %s %s (id=%s)", cls.role, row["email"], row["id"])
        account = AccountRead(**row)
        return account, create_principal_token(account.id, account.email, cls.role)

    @classmethod
    async def login(cls, data: AccountLogin) -> tuple[AccountRead, str]:
        """Check credentials and issue a token.

        Unknown emails and wrong passwords produce the same error so the
        response does not reveal which accounts exist.
        """
        row = cls.repository.find_by_email(data.email)
        if not row or not verify_password(data.password, row["password_hash"]):
            logger.warning("Failed %s login for %s", cls.role, data.email)
            raise UnauthorizedError("Invalid email or password")
        account = AccountRead(**row)
        logger.info("%s %s logged in", cls.role.capitalize(), account.email)
        return account, create_principal_token(account.id, account.email, cls.role)

    @classmethod
    async def get_profile(cls, account_id: int) -> AccountRead:
        row = cls.repository.find_by_id(account_id)
        if not row:
            raise NotFoundError("Account not found")
        return AccountRead(**row)

    @classmethod
    async def update_profile(cls, account_id: int, data: ProfileUpdate) -> AccountRead:
        fields = {k: v for k, v in data.model_dump().items() if v is not None}
        if "name" in fields:
            fields["name"] = fields["name"].strip()
        row = cls.repository.update_profile(account_id, fields)
        if not row:
            raise NotFoundError("Account not found")
        logger.info("Updated %s profile %s: %s", cls.role, account_id, sorted(fields))
        return AccountRead(**row)

    @classmethod
    async def change_password(cls, account_id: int, data: PasswordChange) -> None:
        row = cls.repository.find_by_id(account_id, with_password=True)
        if not row:
            raise NotFoundError("Account not found")
        if not verify_password(data.current_password, row["password_hash"]):
            logger.warning("Password change rejected for %s %s", cls.role, account_id)
            raise UnauthorizedError("Current password is incorrect")
        cls.repository.update_password(account_id, hash_password(data.new_password))
        logger.info("Password changed for %s %s", cls.role, account_id)


class UserService(AccountService):
    repository = UserRepository
    role = ROLE_USER


class OrganizerService(AccountService):
    repository = OrganizerRepository
    role = ROLE_ORGANIZER

    @classmethod
    def ensure_default_admin(cls) -> None:
        """Create the organizer configured via ``ADMIN_EMAIL``/``ADMIN_PASSWORD``.

        Does nothing when either setting is empty or the account exists.
        """
        if not settings.admin_email or not settings.admin_password:
            return
        email = settings.admin_email.lower()
        if cls.repository.find_by_email(email):
            return
        cls.repository.create(
            name=settings.admin_name,
            email=email,
            password_hash=hash_password(settings.admin_password),
        )
        logger.info("Created default organizer account %s", email)
