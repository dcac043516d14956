from fastapi import APIRouter, Query
from datetime import date as CalendarDate

from salon.schemas.appointment import AvailableSlotsResponse, SlotCheckRequest, SlotCheckResponse
from salon.services import availability
from salon.services.appointment_service import check_slot, get_available_slots
from salon.services.catalog_service import require_service
from salon.services.staff_service import require_staff

router = APIRouter()

@router.get("/slots", response_model=AvailableSlotsResponse)
async def list_available_slots(
    staffId: str = Query(..., description="Staff member to book with"),
    serviceId: str = Query(..., description="Service to book"),
    date: CalendarDate = Query(..., description="Date in YYYY-MM-DD format")
):
    """
    Start times a customer can book for a service with a staff member on a date
    """
    slots = await get_available_slots(staffId, serviceId, date)
    return {
        "date": date.isoformat(),
        "staffId": staffId,
        "serviceId": serviceId,
        "slots": slots,
    }

@router.post("/check", response_model=SlotCheckResponse)
async def check_time_slot(slot: SlotCheckRequest):
    """
    Check whether one start time is free.

    Pass excludeAppointmentId when re-checking an appointment that is being
    moved so it does not conflict with itself.
    """
    await require_staff(slot.staffId)
    service = await require_service(slot.serviceId)
    try:
        end_time = availability.get_appointment_end_time(slot.time, service["duration"])
    except availability.MidnightCrossingError:
        # Never bookable, whatever else is on the calendar
        return {"available": False, "endTime": None}

    is_free = await check_slot(
        slot.staffId, slot.serviceId, slot.date, slot.time,
        exclude_appointment_id=slot.excludeAppointmentId
    )
    return {"available": is_free, "endTime": end_time}
