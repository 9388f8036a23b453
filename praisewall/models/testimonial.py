"""
Testimonial submission schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List
from datetime import datetime
from enum import Enum

class TestimonialStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class TestimonialSubmit(BaseModel):
    # Required-ness is checked by the submission pipeline so the first missing
    # field produces one readable message
    name: str = ""
    email: str = ""
    content: str = ""
    rating: Optional[int] = 5
    company: Optional[str] = ""
    image_url: Optional[str] = ""
    video_url: Optional[str] = ""
    custom_fields: Dict[str, Any] = Field(default_factory=dict)

class TestimonialResponse(BaseModel):
    id: str = Field(alias="_id")
    user_id: str
    form_id: str
    name: str
    email: str
    company: Optional[str] = ""
    rating: Optional[int] = None
    content: str
    image_url: Optional[str] = ""
    video_url: Optional[str] = ""
    custom_fields: Dict[str, Any] = Field(default_factory=dict)
    status: TestimonialStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

class WallEntry(BaseModel):
    """Public projection of an approved testimonial"""
    id: str = Field(alias="_id")
    name: str
    company: Optional[str] = ""
    rating: Optional[int] = None
    content: str
    image_url: Optional[str] = ""
    video_url: Optional[str] = ""
    created_at: datetime

    class Config:
        populate_by_name = True

class SubmissionReceipt(BaseModel):
    id: str
    status: TestimonialStatus
    message: str

class UploadResponse(BaseModel):
    public_url: str
    path: str

class TestimonialList(BaseModel):
    testimonials: List[TestimonialResponse]
    total: int
