import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eventhub.logger import get_logger
from eventhub.result import ErrorType, Result
from eventhub.schema.pagination_schema import PaginationParameters

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


@dataclass
class PagedList(Generic[ModelT]):
    items: List[ModelT] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 0
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0 if self.total_items == 0 else 1
        return math.ceil(self.total_items / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


class Repository(Generic[ModelT]):
    """Generic data access over one mapped class.

    ``insert``/``update``/``delete`` only stage changes on the session;
    ``save_changes`` commits them. Every query or commit that hits the database
    returns a :class:`Result`, turning ``SQLAlchemyError`` into ``DatabaseError``
    after rolling the session back.

    Related data is loaded with explicit loader options, e.g.
    ``options=[selectinload(Event.category)]``.
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model

    @property
    def _name(self) -> str:
        return self.model.__name__

    def _fail(self, action: str, exc: SQLAlchemyError) -> Result:
        self.db.rollback()
        logger.error("database_error", model=self._name, action=action, error=type(exc).__name__, exc_info=exc)
        return Result.failure(f"A database error occurred while {action} {self._name}.", ErrorType.DATABASE_ERROR)

    # ------------------ Staging ------------------
    def insert(self, entity: ModelT) -> None:
        self.db.add(entity)

    def update(self, entity: ModelT) -> None:
        self.db.add(entity)

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)

    # ------------------ Queries ------------------
    async def get_first_or_default(self, *filters, options: Sequence[Any] = ()) -> Result[Optional[ModelT]]:
        try:
            entity = self.db.query(self.model).options(*options).filter(*filters).first()
        except SQLAlchemyError as e:
            return self._fail("reading", e)
        return Result.success(entity)

    async def get_all(
        self,
        *filters,
        pagination: Optional[PaginationParameters] = None,
        order_by: Sequence[Any] = (),
        options: Sequence[Any] = (),
    ) -> Result[PagedList[ModelT]]:
        try:
            query = self.db.query(self.model).filter(*filters)
            total_items = query.order_by(None).count()

            query = query.options(*options).order_by(*order_by)
            if pagination is not None:
                query = query.offset(pagination.offset).limit(pagination.page_size)

            items = query.all()
        except SQLAlchemyError as e:
            return self._fail("listing", e)

        page = pagination.page if pagination else 1
        page_size = pagination.page_size if pagination else total_items
        return Result.success(PagedList(items=items, current_page=page, page_size=page_size, total_items=total_items))

    async def exists(self, *filters) -> Result[bool]:
        try:
            found = self.db.query(self.model).filter(*filters).first() is not None
        except SQLAlchemyError as e:
            return self._fail("reading", e)
        return Result.success(found)

    # ------------------ Persistence ------------------
    async def flush(self) -> Result[None]:
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            return self._fail("saving", e)
        return Result.success(None)

    async def save_changes(self) -> Result[int]:
        changes = len(self.db.new) + len(self.db.dirty) + len(self.db.deleted)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            return self._fail("saving", e)
        return Result.success(changes)
