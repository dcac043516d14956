from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date as CalendarDate
from enum import Enum

from salon.schemas.customer import CustomerInfo
from salon.schemas.staff import TIME_PATTERN

class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"

class AppointmentCreate(BaseModel):
    customerInfo: CustomerInfo
    staffId: str
    serviceId: str
    date: CalendarDate
    time: str = Field(..., pattern=TIME_PATTERN)
    notes: str = ""

class AppointmentUpdate(BaseModel):
    date: Optional[CalendarDate] = None
    time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    notes: Optional[str] = None

class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus

class AppointmentCancel(BaseModel):
    reason: Optional[str] = None

class AppointmentResponse(BaseModel):
    id: str
    clientId: str
    staffId: str
    serviceId: str
    date: str
    time: str
    endTime: str
    status: AppointmentStatus
    notes: str = ""
    isCallIn: bool = False
    isWorkInApproval: bool = False
    originalRequestId: Optional[str] = None
    cancellationReason: Optional[str] = None
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }

class AvailableSlotsResponse(BaseModel):
    date: str
    staffId: str
    serviceId: str
    slots: List[str]

class SlotCheckRequest(BaseModel):
    staffId: str
    serviceId: str
    date: CalendarDate
    time: str = Field(..., pattern=TIME_PATTERN)
    excludeAppointmentId: Optional[str] = None

class SlotCheckResponse(BaseModel):
    available: bool
    endTime: Optional[str] = None
