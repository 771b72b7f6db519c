from typing import Optional
from pydantic import BaseModel, EmailStr, UUID4
from datetime import datetime


# Upsert from the identity provider (POST /users)
class UserUpsert(BaseModel):
    clerk_id: str
    name: str
    email: EmailStr
    image: Optional[str] = ""


class User(BaseModel):
    id: UUID4
    clerk_id: str
    name: str
    email: str
    image: Optional[str] = ""
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# Admin console login (POST /admin/auth/login)
class AdminLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str
