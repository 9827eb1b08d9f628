import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import tokens
from dependencies import get_auth_service
from errors import InvalidToken, Unauthorized
from schemas import AuthResponse, UserLogin, UserOut, UserRegister, VerifyResponse
from services import AuthService

logger = logging.getLogger(__name__)

auth_router = APIRouter()
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_claim(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> tokens.TokenClaim:
    """Resolve the caller from ``Authorization: Bearer <token>``."""
    if credentials is None or not credentials.credentials:
        raise Unauthorized("No token provided")
    try:
        claim = tokens.verify(credentials.credentials)
    except InvalidToken as exc:
        logger.debug("Rejected token on %s: %s", request.url.path, exc)
        raise Unauthorized("Invalid or expired token")

    request.state.user_id = claim.user_id
    request.state.email = claim.email
    return claim


@auth_router.post(
    "/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
async def register(
    payload: UserRegister, service: AuthService = Depends(get_auth_service)
):
    token, user = service.register(payload)
    return AuthResponse(token=token, user=UserOut.model_validate(user))


@auth_router.post("/login", response_model=AuthResponse)
async def login(
    payload: UserLogin, service: AuthService = Depends(get_auth_service)
):
    token, user = service.login(payload)
    return AuthResponse(token=token, user=UserOut.model_validate(user))


@auth_router.get("/verify", response_model=VerifyResponse)
async def verify(
    claim: tokens.TokenClaim = Depends(get_current_claim),
    service: AuthService = Depends(get_auth_service),
):
    return VerifyResponse(
        valid=True, user=UserOut.model_validate(service.current_user(claim))
    )
