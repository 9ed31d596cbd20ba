from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import date, datetime
import uuid


class RegisterUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    date_of_birth: date


class LoginUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: EmailStr = Field(..., max_length=254)
    password: str = Field(..., min_length=1)


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(..., max_length=254)
    date_of_birth: date


class GetUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    date_of_birth: date
    registered_at: datetime


class UserEventParticipationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: uuid.UUID
    user_id: uuid.UUID
    registered_at: datetime


class ParticipatedEventSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    date_time: datetime
    location: str


class UserParticipatedEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: uuid.UUID
    registered_at: datetime
    event: Optional[ParticipatedEventSummary] = None
