"""
Testimonial collection form schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class FormBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = ""
    questions: List[str] = Field(default_factory=list)
    allow_video: bool = True
    require_approval: bool = True

class FormCreate(FormBase):
    brand_color: Optional[str] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None

class FormUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    questions: Optional[List[str]] = None
    allow_video: Optional[bool] = None
    require_approval: Optional[bool] = None
    brand_color: Optional[str] = None
    company_name: Optional[str] = None
    company_logo: Optional[str] = None
    is_active: Optional[bool] = None

class FormResponse(FormBase):
    id: str = Field(alias="_id")
    user_id: str
    brand_color: str
    company_name: str = ""
    company_logo: str = ""
    is_active: bool = True
    share_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

class PublicWidget(BaseModel):
    field_id: str
    field_type: str
    input: str
    label: str
    placeholder: str = ""
    required: bool = False
    options: List[str] = Field(default_factory=list)
    min: Optional[int] = None
    max: Optional[int] = None

class PublicFormResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = ""
    questions: List[str] = Field(default_factory=list)
    allow_video: bool
    require_approval: bool
    brand_color: str
    company_name: str = ""
    company_logo: str = ""
    fields: List[PublicWidget] = Field(default_factory=list)
