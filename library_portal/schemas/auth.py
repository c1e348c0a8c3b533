from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

class ProfileCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    role: Optional[str] = Field("student", pattern="^(student|librarian)$")

class ProfileLogin(BaseModel):
    email: EmailStr
    password: str

class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    role: Optional[str] = Field(None, pattern="^(student|librarian)$")
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None

class ProfileResponse(BaseModel):
    id: str
    email: str
    name: str
    role: str
    phone: Optional[str] = None
    address: Optional[str] = None
    createdAt: Optional[datetime] = None

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: ProfileResponse
