from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class AccountSettingsUpdate(BaseModel):
    company_name: str = ""
    company_logo: str = ""
    brand_color: str = Field("#4F46E5", pattern=r"^#[0-9A-Fa-f]{6}$")
    custom_css: str = ""
    email_notifications: bool = True

class AccountSettingsResponse(AccountSettingsUpdate):
    id: Optional[str] = Field(None, alias="_id")
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
