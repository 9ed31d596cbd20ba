from typing import BinaryIO, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from eventhub.constant_file import event_images_dir
from eventhub.controller.category_controller import get_category_entity
from eventhub.file_storage import FileStorageService
from eventhub.logger import get_logger
from eventhub.models.category_model import Category
from eventhub.models.event_model import Event
from eventhub.models.image_model import Image
from eventhub.models.utils import utcnow
from eventhub.repository.repository import Repository
from eventhub.result import ErrorType, Result
from eventhub.schema.event_schema import (
    CreateEventRequest,
    EventFilterCriteria,
    EventImageDetailsResponse,
    GetEventResponse,
    UpdateEventRequest,
)
from eventhub.schema.pagination_schema import PagedResponse, PaginationParameters

logger = get_logger(__name__)

EVENT_DETAILS = (selectinload(Event.category), selectinload(Event.image))


def build_event_filters(criteria: Optional[EventFilterCriteria]) -> list:
    if criteria is None:
        return []

    filters = []
    if criteria.date_from is not None:
        filters.append(Event.date_time >= criteria.date_from)
    if criteria.date_to is not None:
        filters.append(Event.date_time <= criteria.date_to)
    if criteria.location:
        filters.append(func.lower(Event.location).contains(criteria.location.strip().lower(), autoescape=True))
    if criteria.category_name:
        filters.append(Event.category.has(func.lower(Category.name) == criteria.category_name.strip().lower()))
    if criteria.event_name:
        filters.append(func.lower(Event.name) == criteria.event_name.strip().lower())
    return filters


def file_size(file: BinaryIO) -> int:
    file.seek(0, 2)
    size = file.tell()
    file.seek(0)
    return size


async def get_event_entity(db: Session, event_id, options=EVENT_DETAILS) -> Result[Event]:
    found = await Repository(db, Event).get_first_or_default(Event.id == event_id, options=options)
    if found.is_failure:
        return found
    if found.value is None:
        return Result.failure(f"Event with id {event_id} was not found.", ErrorType.RECORD_NOT_FOUND)
    return found


# ------------------ Retrieve ALL Events ------------------
async def get_all_events(
    db: Session,
    pagination: Optional[PaginationParameters] = None,
    criteria: Optional[EventFilterCriteria] = None,
) -> Result[PagedResponse]:
    events = await Repository(db, Event).get_all(
        *build_event_filters(criteria),
        pagination=pagination,
        order_by=[Event.date_time.desc()],
        options=EVENT_DETAILS,
    )
    if events.is_failure:
        return events.forward()
    return Result.success(PagedResponse.from_paged(events.value, GetEventResponse))


async def get_event_by_id(db: Session, event_id) -> Result[GetEventResponse]:
    event = await get_event_entity(db, event_id)
    if event.is_failure:
        return event.forward()
    return Result.success(GetEventResponse.model_validate(event.value))


# ------------------ Add New Event ------------------
async def create_event(db: Session, request: CreateEventRequest) -> Result[GetEventResponse]:
    category = await get_category_entity(db, request.category_id)
    if category.is_failure:
        return category.forward()

    repo = Repository(db, Event)
    new_event = Event(**request.model_dump())
    repo.insert(new_event)

    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("event_created", event_id=str(new_event.id))
    return await get_event_by_id(db, new_event.id)


# ------------------ Update Event ------------------
async def update_event_details(db: Session, event_id, request: UpdateEventRequest) -> Result[GetEventResponse]:
    found = await get_event_entity(db, event_id)
    if found.is_failure:
        return found.forward()

    event = found.value
    if event.category_id != request.category_id:
        category = await get_category_entity(db, request.category_id)
        if category.is_failure:
            return category.forward()

    for key, val in request.model_dump().items():
        setattr(event, key, val)

    repo = Repository(db, Event)
    repo.update(event)
    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()

    return await get_event_by_id(db, event_id)


# ------------------ Delete Event ------------------
async def delete_event(db: Session, storage: FileStorageService, event_id) -> Result[bool]:
    found = await get_event_entity(db, event_id, options=[selectinload(Event.image)])
    if found.is_failure:
        return found.forward()

    event = found.value
    stored_path = event.image.stored_path if event.image else None

    # Image row and participations go with the event
    repo = Repository(db, Event)
    repo.delete(event)
    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()

    if stored_path:
        await _remove_blob(storage, stored_path)

    logger.info("event_deleted", event_id=str(event_id))
    return Result.success(True)


# ------------------ Event Image ------------------
async def _remove_blob(storage: FileStorageService, stored_path: str) -> None:
    removed = await storage.delete_file(stored_path)
    if removed.is_failure:
        logger.warning("image_blob_cleanup_failed", path=stored_path, reason=removed.message)


async def upload_event_image(
    db: Session,
    storage: FileStorageService,
    event_id,
    file: Optional[BinaryIO],
    filename: str,
    content_type: str,
) -> Result[EventImageDetailsResponse]:
    if file is None or file_size(file) == 0:
        return Result.failure("Image file is null or empty.", ErrorType.INVALID_INPUT)

    found = await get_event_entity(db, event_id, options=[selectinload(Event.image)])
    if found.is_failure:
        return found.forward()

    event = found.value
    images = Repository(db, Image)

    previous_path = None
    if event.image is not None:
        previous_path = event.image.stored_path
        images.delete(event.image)
        # One image per event: the old row must be gone before the new insert
        flushed = await images.flush()
        if flushed.is_failure:
            return flushed.forward()

    saved_file = await storage.save_file(file, filename, event_images_dir)
    if saved_file.is_failure:
        db.rollback()
        return saved_file.forward()

    new_image = Image(
        stored_path=saved_file.value,
        content_type=content_type or "application/octet-stream",
        uploaded_at=utcnow(),
        event_id=event.id,
    )
    images.insert(new_image)

    saved = await images.save_changes()
    if saved.is_failure:
        await _remove_blob(storage, saved_file.value)
        return saved.forward()

    if previous_path:
        await _remove_blob(storage, previous_path)

    logger.info("event_image_uploaded", event_id=str(event_id), path=new_image.stored_path)
    return Result.success(EventImageDetailsResponse.model_validate(new_image))


async def delete_event_image(db: Session, storage: FileStorageService, event_id) -> Result[bool]:
    found = await get_event_entity(db, event_id, options=[selectinload(Event.image)])
    if found.is_failure:
        return found.forward()

    event = found.value
    if event.image is None:
        return Result.success(True)

    stored_path = event.image.stored_path
    images = Repository(db, Image)
    images.delete(event.image)

    saved = await images.save_changes()
    if saved.is_failure:
        return saved.forward()

    # Row is gone; a stale blob is only a cleanup problem
    await _remove_blob(storage, stored_path)
    return Result.success(True)
