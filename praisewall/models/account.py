from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime

class AccountBase(BaseModel):
    email: EmailStr
    full_name: str = Field(..., min_length=1, max_length=100)

class AccountCreate(AccountBase):
    password: str = Field(..., min_length=6)

class AccountLogin(BaseModel):
    email: EmailStr
    password: str

class AccountResponse(BaseModel):
    id: str = Field(alias="_id")
    email: str
    full_name: str
    is_active: bool = True
    created_at: datetime

    class Config:
        populate_by_name = True

class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account: AccountResponse

class SessionResponse(BaseModel):
    user: Optional[AccountResponse] = None
