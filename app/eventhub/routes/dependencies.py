import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import jwt
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from eventhub.constant_file import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ROLE_ADMIN, access_token_cookie
from eventhub.file_storage import FileStorageService
from eventhub.schema.event_schema import EventFilterCriteria
from eventhub.schema.pagination_schema import PaginationParameters
from eventhub.token_issuer import TokenIssuer

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    id: uuid.UUID
    email: str
    roles: List[str] = field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return ROLE_ADMIN in self.roles


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_file_storage(request: Request) -> FileStorageService:
    return request.app.state.file_storage


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> CurrentUser:
    """Access token from the ``Authorization`` header, else the access cookie."""
    token = credentials.credentials if credentials else request.cookies.get(access_token_cookie)
    if not token:
        raise _unauthorized("Not authenticated")

    try:
        claims = issuer.decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError:
        raise _unauthorized("Invalid token")

    try:
        user_id = uuid.UUID(str(claims.get("Id", "")))
    except ValueError:
        raise _unauthorized("User ID claim is missing or invalid")

    roles = claims.get("role") or []
    if isinstance(roles, str):
        roles = [roles]
    return CurrentUser(id=user_id, email=claims.get("email", ""), roles=list(roles))


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user


def ensure_admin_or_self(user: CurrentUser, target_id: uuid.UUID) -> None:
    if not (user.is_admin or user.id == target_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed to act on this user")


def get_pagination(
    page: int = Query(1, description="1-based page number"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, description=f"Items per page, at most {MAX_PAGE_SIZE}"),
) -> PaginationParameters:
    return PaginationParameters(page=page, page_size=page_size)


def get_event_filters(
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    location: Optional[str] = Query(None),
    category_name: Optional[str] = Query(None),
    event_name: Optional[str] = Query(None),
) -> EventFilterCriteria:
    try:
        return EventFilterCriteria(
            date_from=date_from,
            date_to=date_to,
            location=location,
            category_name=category_name,
            event_name=event_name,
        )
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False, include_context=False))
