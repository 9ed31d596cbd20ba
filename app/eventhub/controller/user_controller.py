from typing import Optional

from sqlalchemy.orm import Session, selectinload

from eventhub.controller.auth_controller import normalize_email
from eventhub.logger import get_logger
from eventhub.models.event_model import Event
from eventhub.models.participant_model import EventParticipant
from eventhub.models.user_model import User
from eventhub.models.utils import utcnow
from eventhub.repository.repository import Repository
from eventhub.result import ErrorType, Result
from eventhub.schema.pagination_schema import PagedResponse, PaginationParameters
from eventhub.schema.user_schema import (
    GetUserResponse,
    UpdateUserRequest,
    UserEventParticipationResponse,
    UserParticipatedEventResponse,
)

logger = get_logger(__name__)


async def get_user_entity(db: Session, user_id, options=()) -> Result[User]:
    found = await Repository(db, User).get_first_or_default(User.id == user_id, options=options)
    if found.is_failure:
        return found
    if found.value is None:
        return Result.failure(f"User with id {user_id} was not found.", ErrorType.RECORD_NOT_FOUND)
    return found


# ------------------ Retrieve Users ------------------
async def get_user_by_id(db: Session, user_id) -> Result[GetUserResponse]:
    user = await get_user_entity(db, user_id)
    if user.is_failure:
        return user.forward()
    return Result.success(GetUserResponse.model_validate(user.value))


async def get_all_users(db: Session, pagination: Optional[PaginationParameters] = None) -> Result[PagedResponse]:
    users = await Repository(db, User).get_all(
        pagination=pagination or PaginationParameters(),
        order_by=[User.last_name, User.first_name],
    )
    if users.is_failure:
        return users.forward()
    return Result.success(PagedResponse.from_paged(users.value, GetUserResponse))


# ------------------ Update User ------------------
async def update_user(db: Session, user_id, request: UpdateUserRequest) -> Result[GetUserResponse]:
    repo = Repository(db, User)

    found = await get_user_entity(db, user_id)
    if found.is_failure:
        return found.forward()

    user = found.value
    email = normalize_email(request.email)
    if user.email != email:
        taken = await repo.exists(User.email == email, User.id != user_id)
        if taken.is_failure:
            return taken.forward()
        if taken.value:
            return Result.failure(f"User with email {email} already exists.", ErrorType.ALREADY_EXISTS)

    user.first_name = request.first_name.strip()
    user.last_name = request.last_name.strip()
    user.email = email
    user.date_of_birth = request.date_of_birth

    repo.update(user)
    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()
    return Result.success(GetUserResponse.model_validate(user))


# ------------------ Delete User ------------------
async def delete_user(db: Session, user_id) -> Result[bool]:
    found = await get_user_entity(db, user_id)
    if found.is_failure:
        return found.forward()

    # Participations, refresh tokens and role links are removed with the user
    repo = Repository(db, User)
    repo.delete(found.value)
    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("user_deleted", user_id=str(user_id))
    return Result.success(True)


# ------------------ Event Participation ------------------
async def participate_in_event(db: Session, user_id, event_id) -> Result[UserEventParticipationResponse]:
    user = await get_user_entity(db, user_id)
    if user.is_failure:
        return user.forward()

    found = await Repository(db, Event).get_first_or_default(
        Event.id == event_id, options=[selectinload(Event.participants)]
    )
    if found.is_failure:
        return found.forward()
    event = found.value
    if event is None:
        return Result.failure(f"Event with id {event_id} was not found.", ErrorType.RECORD_NOT_FOUND)

    if len(event.participants) >= event.max_participants:
        return Result.failure("The maximum number of participants has been reached.", ErrorType.INVALID_INPUT)

    if any(p.user_id == user_id for p in event.participants):
        return Result.failure(
            f"User {user_id} already participates in event {event_id}.", ErrorType.ALREADY_EXISTS
        )

    participants = Repository(db, EventParticipant)
    participation = EventParticipant(event_id=event_id, user_id=user_id, registered_at=utcnow())
    participants.insert(participation)

    saved = await participants.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("event_joined", user_id=str(user_id), event_id=str(event_id))
    return Result.success(UserEventParticipationResponse.model_validate(participation))


async def cancel_event_participation(db: Session, user_id, event_id) -> Result[bool]:
    participants = Repository(db, EventParticipant)

    found = await participants.get_first_or_default(
        EventParticipant.user_id == user_id, EventParticipant.event_id == event_id
    )
    if found.is_failure:
        return found.forward()
    if found.value is None:
        return Result.failure(
            f"User {user_id} does not participate in event {event_id}.", ErrorType.RECORD_NOT_FOUND
        )

    participants.delete(found.value)
    saved = await participants.save_changes()
    if saved.is_failure:
        return saved.forward()
    return Result.success(True)


async def get_user_participated_events(
    db: Session, user_id, pagination: Optional[PaginationParameters] = None
) -> Result[PagedResponse]:
    user = await get_user_entity(db, user_id)
    if user.is_failure:
        return user.forward()

    participations = await Repository(db, EventParticipant).get_all(
        EventParticipant.user_id == user_id,
        pagination=pagination,
        order_by=[EventParticipant.registered_at.desc()],
        options=[selectinload(EventParticipant.event)],
    )
    if participations.is_failure:
        return participations.forward()
    return Result.success(PagedResponse.from_paged(participations.value, UserParticipatedEventResponse))
