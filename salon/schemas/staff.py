from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import datetime

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

DAYS_OF_WEEK = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

class DayAvailability(BaseModel):
    start: str = Field("09:00", pattern=TIME_PATTERN)
    end: str = Field("17:00", pattern=TIME_PATTERN)
    available: bool = False

    @model_validator(mode="after")
    def check_window(self):
        # Zero-padded HH:MM compares correctly as a string
        if self.available and self.start >= self.end:
            raise ValueError("start must be before end on an available day")
        return self

class WeeklyAvailability(BaseModel):
    monday: DayAvailability = Field(default_factory=DayAvailability)
    tuesday: DayAvailability = Field(default_factory=DayAvailability)
    wednesday: DayAvailability = Field(default_factory=DayAvailability)
    thursday: DayAvailability = Field(default_factory=DayAvailability)
    friday: DayAvailability = Field(default_factory=DayAvailability)
    saturday: DayAvailability = Field(default_factory=DayAvailability)
    sunday: DayAvailability = Field(default_factory=DayAvailability)

class StaffCreate(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = ""
    bio: str = ""
    specialties: List[str] = []
    avatar: str = ""
    availability: WeeklyAvailability = Field(default_factory=WeeklyAvailability)
    isActive: bool = True

class StaffUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    specialties: Optional[List[str]] = None
    avatar: Optional[str] = None
    availability: Optional[WeeklyAvailability] = None
    isActive: Optional[bool] = None

class StaffResponse(BaseModel):
    id: str
    name: str
    phone: str = ""
    bio: str = ""
    specialties: List[str] = []
    avatar: str = ""
    availability: WeeklyAvailability
    isActive: bool
    createdAt: datetime
    updatedAt: Optional[datetime] = None

    class Config:
        populate_by_name = True
        json_encoders = {
            datetime: lambda dt: dt.isoformat()
        }
