import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from eventhub.controller.user_controller import (
    cancel_event_participation,
    delete_user,
    get_all_users,
    get_user_by_id,
    get_user_participated_events,
    participate_in_event,
    update_user,
)
from eventhub.database import get_db
from eventhub.response_model import result_to_response
from eventhub.routes.dependencies import (
    CurrentUser,
    ensure_admin_or_self,
    get_current_user,
    get_pagination,
    require_admin,
)
from eventhub.schema.pagination_schema import PaginationParameters
from eventhub.schema.user_schema import UpdateUserRequest

router = APIRouter()


# ----------------------- CURRENT USER -----------------------
@router.get("/me", response_description="Retrieve the current user")
async def get_me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    result = await get_user_by_id(db, user.id)
    return result_to_response(result, "User retrieved successfully")


@router.put("/me", response_description="Update the current user")
async def update_me(
    request: UpdateUserRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = await update_user(db, user.id, request)
    return result_to_response(result, "User updated successfully")


@router.delete("/me", response_description="Delete the current user")
async def delete_me(user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    result = await delete_user(db, user.id)
    return result_to_response(result, "User deleted successfully")


# ----------------------- PARTICIPATION -----------------------
@router.get("/participated-events", response_description="Events the current user joined")
async def get_participated_events(
    pagination: PaginationParameters = Depends(get_pagination),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = await get_user_participated_events(db, user.id, pagination)
    return result_to_response(result, "Participated events retrieved successfully")


@router.post("/participate/{event_id}", response_description="Join an event")
async def participate(
    event_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = await participate_in_event(db, user.id, event_id)
    return result_to_response(result, "Joined event successfully")


@router.delete("/participate/{event_id}", response_description="Leave an event")
async def cancel_participation(
    event_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = await cancel_event_participation(db, user.id, event_id)
    return result_to_response(result, "Participation cancelled successfully")


# ----------------------- GET ALL USERS -----------------------
@router.get("", response_description="Retrieve all users")
async def get_users(
    pagination: PaginationParameters = Depends(get_pagination),
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    result = await get_all_users(db, pagination)
    return result_to_response(result, "Users retrieved successfully")


@router.get("/{user_id}", response_description="Retrieve a user")
async def get_user(
    user_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    result = await get_user_by_id(db, user_id)
    return result_to_response(result, "User retrieved successfully")


# ----------------------- UPDATE USER -----------------------
@router.put("/{user_id}", response_description="Update user details")
async def update_user_data(
    user_id: uuid.UUID,
    request: UpdateUserRequest,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_admin_or_self(user, user_id)
    result = await update_user(db, user_id, request)
    return result_to_response(result, "User updated successfully")


# ----------------------- DELETE USER -----------------------
@router.delete("/{user_id}", response_description="Delete a user")
async def delete_user_data(
    user_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ensure_admin_or_self(user, user_id)
    result = await delete_user(db, user_id)
    return result_to_response(result, "User deleted successfully")


__all__ = ["router"]
