"""
TaskTrack Backend - Account Service
===================================

What:  Registration and login rules.
Who:   Called by the /register and /login route handlers.

Login contract:
    Any failure (unknown email, wrong password) raises the same
    AuthenticationError, so both produce an identical 401 body. Which factor
    failed is recorded in the exception context for the server log only.
"""

import hmac
import logging

from tasktrack.exceptions import AuthenticationError, ConflictError
from tasktrack.schemas.account import LoginRequest, LoginResponse, RegisterRequest
from tasktrack.schemas.common import MessageResponse
from tasktrack.schemas.task import TaskResponse
from tasktrack.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


def secrets_match(provided: str, stored: str) -> bool:
    """Compare a provided secret with the stored one in constant time."""
    return hmac.compare_digest(provided.encode("utf-8"), stored.encode("utf-8"))


class AccountService:
    """Stateless; receives the request's gateway on every call."""

    async def register(
        self, gateway: PersistenceGateway, request: RegisterRequest
    ) -> MessageResponse:
        """
        Create a user unless the email is already registered.

        Raises:
            ConflictError: email taken (checked first, and again by the
                           UNIQUE constraint if two registrations race)
            DatabaseError: store failure
        """
        existing = await gateway.find_user_by_email(request.email)
        if existing is not None:
            raise ConflictError(context={"email_taken": True})

        await gateway.create_user(
            user_name=request.user_name,
            email=request.email,
            password=request.password,
        )
        return MessageResponse(message="User created successfully")

    async def login(
        self, gateway: PersistenceGateway, request: LoginRequest
    ) -> LoginResponse:
        """
        Authenticate by comparing the provided password with the stored one.

        Returns the user summary (no password) with all of the user's tasks.
        """
        user = await gateway.find_user_by_email_with_tasks(request.email)
        if user is None:
            raise AuthenticationError(context={"reason": "unknown_email"})

        if not secrets_match(request.password, user.password):
            raise AuthenticationError(context={"reason": "password_mismatch", "user_id": user.id})

        logger.info("User %s logged in", user.id)
        return LoginResponse(
            id=user.id,
            user_name=user.user_name,
            email=user.email,
            created_in=user.created_in,
            tasks=[TaskResponse.model_validate(task) for task in user.tasks],
        )


account_service = AccountService()
