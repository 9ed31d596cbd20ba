from sqlalchemy import func
from sqlalchemy.orm import Session

from eventhub.logger import get_logger
from eventhub.models.category_model import Category
from eventhub.models.event_model import Event
from eventhub.repository.repository import Repository
from eventhub.result import ErrorType, Result
from eventhub.schema.category_schema import CreateUpdateCategoryRequest, GetCategoryResponse
from eventhub.schema.pagination_schema import PagedResponse, PaginationParameters

logger = get_logger(__name__)


async def get_category_entity(db: Session, category_id) -> Result[Category]:
    found = await Repository(db, Category).get_first_or_default(Category.id == category_id)
    if found.is_failure:
        return found
    if found.value is None:
        return Result.failure(f"Category with id {category_id} was not found.", ErrorType.RECORD_NOT_FOUND)
    return found


async def _name_conflict_check(db: Session, name: str, exclude_id=None) -> Result[bool]:
    filters = [func.lower(Category.name) == name.lower()]
    if exclude_id is not None:
        filters.append(Category.id != exclude_id)

    taken = await Repository(db, Category).exists(*filters)
    if taken.is_failure:
        return taken
    if taken.value:
        return Result.failure(f"Category with name '{name}' already exists.", ErrorType.ALREADY_EXISTS)
    return Result.success(True)


# ------------------ Retrieve ALL Categories ------------------
async def get_all_categories(db: Session, pagination: PaginationParameters = None) -> Result[PagedResponse]:
    categories = await Repository(db, Category).get_all(pagination=pagination, order_by=[Category.name])
    if categories.is_failure:
        return categories.forward()
    return Result.success(PagedResponse.from_paged(categories.value, GetCategoryResponse))


async def get_category_by_id(db: Session, category_id) -> Result[GetCategoryResponse]:
    category = await get_category_entity(db, category_id)
    if category.is_failure:
        return category.forward()
    return Result.success(GetCategoryResponse.model_validate(category.value))


# ------------------ Add New Category ------------------
async def create_category(db: Session, request: CreateUpdateCategoryRequest) -> Result[GetCategoryResponse]:
    conflict = await _name_conflict_check(db, request.name)
    if conflict.is_failure:
        return conflict.forward()

    repo = Repository(db, Category)
    category = Category(name=request.name)
    repo.insert(category)

    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("category_created", category_id=str(category.id))
    return Result.success(GetCategoryResponse.model_validate(category))


# ------------------ Update Category ------------------
async def update_category(db: Session, category_id, request: CreateUpdateCategoryRequest) -> Result[GetCategoryResponse]:
    found = await get_category_entity(db, category_id)
    if found.is_failure:
        return found.forward()

    category = found.value
    if category.name == request.name:
        return Result.success(GetCategoryResponse.model_validate(category))

    conflict = await _name_conflict_check(db, request.name, exclude_id=category.id)
    if conflict.is_failure:
        return conflict.forward()

    repo = Repository(db, Category)
    category.name = request.name
    repo.update(category)

    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()
    return Result.success(GetCategoryResponse.model_validate(category))


# ------------------ Delete Category ------------------
async def delete_category(db: Session, category_id) -> Result[bool]:
    found = await get_category_entity(db, category_id)
    if found.is_failure:
        return found.forward()

    in_use = await Repository(db, Event).exists(Event.category_id == category_id)
    if in_use.is_failure:
        return in_use.forward()
    if in_use.value:
        return Result.failure("Category is still used by one or more events.", ErrorType.INVALID_INPUT)

    repo = Repository(db, Category)
    repo.delete(found.value)
    saved = await repo.save_changes()
    if saved.is_failure:
        return saved.forward()

    logger.info("category_deleted", category_id=str(category_id))
    return Result.success(True)
