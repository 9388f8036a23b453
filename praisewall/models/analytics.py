from pydantic import BaseModel, Field
from typing import Dict, List

from praisewall.models.testimonial import TestimonialResponse

class FormCount(BaseModel):
    form_id: str
    title: str
    total: int
    approved: int

class AnalyticsResponse(BaseModel):
    total_testimonials: int
    approved_testimonials: int
    pending_testimonials: int
    rejected_testimonials: int
    average_rating: float
    rating_distribution: Dict[str, int] = Field(default_factory=dict)
    forms: List[FormCount] = Field(default_factory=list)

class DashboardResponse(BaseModel):
    total_testimonials: int
    pending_approval: int
    average_rating: float
    recent: List[TestimonialResponse] = Field(default_factory=list)
