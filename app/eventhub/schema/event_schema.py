from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from typing import Optional
from datetime import datetime, timezone
import uuid

from eventhub.constant_file import upload_url_prefix
from eventhub.schema.category_schema import GetCategoryResponse


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EventDetailsRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    date_time: datetime
    location: str = Field(..., min_length=1, max_length=300)
    max_participants: int = Field(..., gt=0)
    category_id: uuid.UUID

    @field_validator("date_time")
    @classmethod
    def normalize_date_time(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class CreateEventRequest(EventDetailsRequest):
    @field_validator("date_time")
    @classmethod
    def must_be_in_future(cls, v: datetime) -> datetime:
        v = to_naive_utc(v)
        if v <= datetime.now(timezone.utc).replace(tzinfo=None):
            raise ValueError("Event date must be in the future")
        return v


class UpdateEventRequest(EventDetailsRequest):
    pass


class EventFilterCriteria(BaseModel):
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    location: Optional[str] = Field(None, max_length=300)
    category_name: Optional[str] = Field(None, max_length=100)
    event_name: Optional[str] = Field(None, max_length=200)

    @field_validator("date_from", "date_to")
    @classmethod
    def normalize_dates(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to must be on or after date_from")
        return self


class EventImageDetailsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    stored_path: str
    content_type: str
    uploaded_at: datetime

    @computed_field
    @property
    def url(self) -> str:
        return upload_url_prefix + self.stored_path


class GetEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str
    date_time: datetime
    location: str
    max_participants: int
    category: GetCategoryResponse
    image: Optional[EventImageDetailsResponse] = None
