"""
Custom form field schemas for the form builder
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum

class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    RATING = "rating"
    SELECT = "select"
    CHECKBOX = "checkbox"

class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"

class FormFieldCreate(BaseModel):
    # Kept as a plain string: unknown types are refused by the schema manager
    # with a reason instead of a pydantic error
    field_type: str = FieldType.TEXT.value
    label: str = ""
    placeholder: str = ""
    required: bool = False
    options: List[str] = Field(default_factory=list)

class FormFieldUpdate(BaseModel):
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[List[str]] = None

class FormFieldResponse(BaseModel):
    id: str = Field(alias="_id")
    form_id: str
    field_type: str
    label: str
    placeholder: str = ""
    required: bool = False
    options: List[str] = Field(default_factory=list)
    order_index: int
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

class FieldMoveRequest(BaseModel):
    direction: MoveDirection

class FieldMoveResponse(BaseModel):
    moved: bool
    reason: Optional[str] = None
    fields: List[FormFieldResponse]
