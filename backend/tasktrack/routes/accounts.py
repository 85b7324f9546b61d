"""
TaskTrack Backend - Account Route Handlers
==========================================

What:  POST /register and POST /login.
How:   Body schemas are validated by FastAPI (400 on failure, see main.py),
       then AccountService applies the account rules.
"""

import logging

from fastapi import APIRouter, Depends

from tasktrack.schemas.account import LoginRequest, LoginResponse, RegisterRequest
from tasktrack.schemas.common import ErrorResponse, MessageResponse
from tasktrack.services.account_service import account_service
from tasktrack.services.gateway import PersistenceGateway, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Accounts"])


@router.post(
    "/register",
    status_code=201,
    response_model=MessageResponse,
    responses={
        400: {"description": "Invalid body or email already registered", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def register(
    payload: RegisterRequest,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> MessageResponse:
    return await account_service.register(gateway, payload)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in with email and password",
    description=(
        "Returns the user summary and all of the user's tasks. Unknown email "
        "and wrong password produce the same 401 response."
    ),
)
async def login(
    payload: LoginRequest,
    gateway: PersistenceGateway = Depends(get_gateway),
) -> LoginResponse:
    return await account_service.login(gateway, payload)
