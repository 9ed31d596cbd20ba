from pydantic import BaseModel, field_validator
from typing import Generic, List, TypeVar
from eventhub.constant_file import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, FALLBACK_PAGE_SIZE

T = TypeVar("T")


class PaginationParameters(BaseModel):
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, v):
        v = int(v)
        return v if v >= 1 else 1

    @field_validator("page_size", mode="before")
    @classmethod
    def clamp_page_size(cls, v):
        v = int(v)
        if v > MAX_PAGE_SIZE:
            return MAX_PAGE_SIZE
        if v <= 0:
            return FALLBACK_PAGE_SIZE
        return v

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PagedResponse(BaseModel, Generic[T]):
    data: List[T]
    current_page: int
    page_size: int
    total_items: int
    total_pages: int

    @classmethod
    def from_paged(cls, paged, schema) -> "PagedResponse":
        return cls(
            data=[schema.model_validate(item) for item in paged.items],
            current_page=paged.current_page,
            page_size=paged.page_size,
            total_items=paged.total_items,
            total_pages=paged.total_pages,
        )
