from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date as CalendarDate
from enum import Enum

from salon.schemas.customer import CustomerInfo
from salon.schemas.staff import TIME_PATTERN

class WorkInStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"

class WorkInRequestCreate(BaseModel):
    customerInfo: CustomerInfo
    staffId: str
    serviceId: str
    requestedDate: CalendarDate
    requestedTime: str = Field(..., pattern=TIME_PATTERN)
    notes: str = ""

class WorkInDecision(BaseModel):
    status: WorkInStatus
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)  # Required when approving
    notes: Optional[str] = None

class WorkInRequestResponse(BaseModel):
    id: str
    staffId: str
    serviceId: str
    requestedDate: str
    requestedTime: str
    customerInfo: CustomerInfo
    status: WorkInStatus
    notes: str = ""
    responseNotes: Optional[str] = None
    appointmentId: Optional[str] = None
    requestTime: datetime
    responseTime: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
