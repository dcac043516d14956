from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    ADMIN = "admin"
    STAFF = "staff"

class UserBase(BaseModel):
    email: EmailStr
    fullName: str

class UserCreate(UserBase):
    password: str
    role: UserRole = UserRole.STAFF
    staffId: Optional[str] = None  # Links a stylist login to a staff profile

class UserResponse(BaseModel):
    id: str
    email: EmailStr
    fullName: str
    role: UserRole
    staffId: Optional[str] = None
    createdAt: datetime
    lastLogin: Optional[datetime] = None
    isActive: bool

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
