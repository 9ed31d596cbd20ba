from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from eventhub.constant_file import access_token_cookie, cookie_secure, refresh_token_cookie
from eventhub.controller.auth_controller import login_user, logout, logout_all, refresh_token, register_user
from eventhub.database import get_db
from eventhub.response_model import ErrorResponseModel, ResponseModel, error_response, result_to_response
from eventhub.routes.dependencies import CurrentUser, get_current_user, get_token_issuer
from eventhub.schema.user_schema import LoginUserRequest, RegisterUserRequest
from eventhub.token_issuer import TokenIssuer, TokenPair

router = APIRouter()


def set_token_cookies(response: Response, issuer: TokenIssuer, tokens: TokenPair) -> None:
    cookie_args = {"httponly": True, "secure": cookie_secure, "samesite": "strict"}
    response.set_cookie(
        access_token_cookie,
        tokens.access_token,
        max_age=int(issuer.access_token_expires.total_seconds()),
        **cookie_args,
    )
    response.set_cookie(
        refresh_token_cookie,
        tokens.refresh_token,
        max_age=int(issuer.refresh_token_expires.total_seconds()),
        **cookie_args,
    )


def clear_token_cookies(response: Response) -> None:
    response.delete_cookie(access_token_cookie)
    response.delete_cookie(refresh_token_cookie)


# ----------------------- REGISTER -----------------------
@router.post("/register", response_description="Register a new user", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterUserRequest, db: Session = Depends(get_db)):
    result = await register_user(db, request)
    return result_to_response(result, "User registered successfully", status.HTTP_201_CREATED)


# ----------------------- LOGIN -----------------------
@router.post("/login", response_description="Log in and receive token cookies")
async def login(
    request: LoginUserRequest,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    result = await login_user(db, issuer, request)
    if result.is_failure:
        return error_response(result)

    response = JSONResponse(content=ResponseModel(None, "Login successful."))
    set_token_cookies(response, issuer, result.value)
    return response


# ----------------------- REFRESH -----------------------
@router.post("/refresh", response_description="Rotate the refresh token")
async def refresh(
    request: Request,
    db: Session = Depends(get_db),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    old_refresh_token = request.cookies.get(refresh_token_cookie)
    if not old_refresh_token:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=ErrorResponseModel("Unauthorized", 401, "Refresh token not found in cookie."),
        )

    result = await refresh_token(db, issuer, old_refresh_token)
    if result.is_failure:
        response = error_response(result)
        clear_token_cookies(response)
        return response

    response = JSONResponse(content=ResponseModel(None, "Tokens refreshed successfully."))
    set_token_cookies(response, issuer, result.value)
    return response


# ----------------------- LOGOUT -----------------------
@router.delete("/logout", response_description="Revoke the current session")
async def logout_current(
    request: Request,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    result = await logout(db, request.cookies.get(refresh_token_cookie, ""))
    response = error_response(result) if result.is_failure else JSONResponse(
        content=ResponseModel(None, "Logout successful.")
    )
    clear_token_cookies(response)
    return response


@router.delete("/logout-all", response_description="Revoke every session of the current user")
async def logout_everywhere(
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    result = await logout_all(db, user.id)
    response = error_response(result) if result.is_failure else JSONResponse(
        content=ResponseModel({"revoked": result.value}, "Logged out from all devices successfully.")
    )
    clear_token_cookies(response)
    return response


__all__ = ["router"]
