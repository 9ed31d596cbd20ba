import uuid

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from eventhub.constant_file import max_image_size
from eventhub.controller.event_controller import (
    create_event,
    delete_event,
    delete_event_image,
    file_size,
    get_all_events,
    get_event_by_id,
    update_event_details,
    upload_event_image,
)
from eventhub.database import get_db
from eventhub.file_storage import FileStorageService
from eventhub.response_model import ErrorResponseModel, result_to_response
from eventhub.routes.dependencies import (
    CurrentUser,
    get_event_filters,
    get_file_storage,
    get_pagination,
    require_admin,
)
from eventhub.schema.event_schema import CreateEventRequest, EventFilterCriteria, UpdateEventRequest
from eventhub.schema.pagination_schema import PaginationParameters

router = APIRouter()


# ----------------------- GET ALL Events -----------------------
@router.get("", response_description="Retrieve events")
async def get_events(
    pagination: PaginationParameters = Depends(get_pagination),
    criteria: EventFilterCriteria = Depends(get_event_filters),
    db: Session = Depends(get_db),
):
    result = await get_all_events(db, pagination, criteria)
    return result_to_response(result, "Events retrieved successfully")


@router.get("/{event_id}", response_description="Retrieve an event")
async def get_event(event_id: uuid.UUID, db: Session = Depends(get_db)):
    result = await get_event_by_id(db, event_id)
    return result_to_response(result, "Event retrieved successfully")


# ----------------------- ADD Event -----------------------
@router.post("", response_description="Create a new event")
async def add_event(
    request: CreateEventRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    result = await create_event(db, request)
    return result_to_response(result, "Event created successfully", status.HTTP_201_CREATED)


# ------------------ Update Event ------------------
@router.put("/{event_id}", response_description="Update an event")
async def update_event(
    event_id: uuid.UUID,
    request: UpdateEventRequest,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    result = await update_event_details(db, event_id, request)
    return result_to_response(result, "Event updated successfully")


# ------------------ Delete Event ------------------
@router.delete("/{event_id}", response_description="Delete an event")
async def remove_event(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
    admin: CurrentUser = Depends(require_admin),
):
    result = await delete_event(db, storage, event_id)
    return result_to_response(result, "Event deleted successfully")


# ------------------ Event Image ------------------
@router.post("/{event_id}/image", response_description="Upload or replace the event image")
async def add_event_image(
    event_id: uuid.UUID,
    image: UploadFile = File(..., description="Image file, at most 10 MB."),
    db: Session = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
    admin: CurrentUser = Depends(require_admin),
):
    if file_size(image.file) > max_image_size:
        return JSONResponse(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            content=ErrorResponseModel("PayloadTooLarge", 413, "Image must not exceed 10 MB."),
        )

    result = await upload_event_image(
        db, storage, event_id, image.file, image.filename or "", image.content_type
    )
    return result_to_response(result, "Event image uploaded successfully")


@router.delete("/{event_id}/image", response_description="Delete the event image")
async def remove_event_image(
    event_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: FileStorageService = Depends(get_file_storage),
    admin: CurrentUser = Depends(require_admin),
):
    result = await delete_event_image(db, storage, event_id)
    return result_to_response(result, "Event image deleted successfully")


__all__ = ["router"]
