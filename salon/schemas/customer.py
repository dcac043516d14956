from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

PHONE_PATTERN = r"^$|^\+?[1-9][\d\s\-()]{0,20}$"

class CustomerInfo(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field("", pattern=PHONE_PATTERN)
    notes: str = ""

class CustomerResponse(BaseModel):
    id: str
    name: str
    phone: str = ""
    notes: str = ""
    lastVisit: Optional[str] = None
    createdAt: datetime

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
