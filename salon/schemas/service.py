from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    duration: int = Field(..., gt=0)  # Duration in minutes
    price: float = Field(0, ge=0)
    category: str = ""  # e.g., 'Hair', 'Color', 'Nails'
    description: str = ""
    image: str = ""
    isActive: bool = True

class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0)
    price: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    isActive: Optional[bool] = None

class ServiceResponse(BaseModel):
    id: str
    name: str
    duration: int
    price: float
    category: str = ""
    description: str = ""
    image: str = ""
    isActive: bool
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
