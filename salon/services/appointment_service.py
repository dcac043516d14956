"""
Appointment booking on top of the availability engine.

Checking a slot and writing the appointment are two round trips, so a
second booking can land in between. Every write that claims a slot
(create, move, approve a work-in) therefore goes through the same
write-then-verify step: the claim is written first, the staff member's day
is re-read, and if any other live claim overlaps it the write is undone and
SlotUnavailableError raised. Two racing claims may both fail, but both can
never succeed.

A move is claimed as ``pendingMove`` on the appointment itself, so the old
slot stays held until the new one is confirmed.
"""

from typing import Dict, Any, List, Optional, Tuple
from datetime import date, datetime
from bson import ObjectId
import logging
import pytz

from salon.core.config import settings
from salon.db.mongodb import db
from salon.schemas.appointment import AppointmentCreate, AppointmentStatus, AppointmentUpdate
from salon.services import availability
from salon.services.catalog_service import require_service
from salon.services.customer_service import find_or_create_customer, record_visit
from salon.services.errors import InvalidStateError, NotFoundError, SlotUnavailableError
from salon.services.staff_service import require_staff

logger = logging.getLogger(__name__)

# Appointments in these states can no longer be moved or re-opened
CLOSED_STATUSES = [AppointmentStatus.CANCELLED.value]

def _with_id(appointment: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if appointment:
        appointment["id"] = str(appointment["_id"])
    return appointment

def salon_now() -> datetime:
    """Current wall-clock time at the salon."""
    return datetime.now(pytz.timezone(settings.SALON_TIMEZONE))

async def get_appointment_by_id(appointment_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a non-archived appointment by ID
    """
    if not ObjectId.is_valid(appointment_id):
        return None
    appointment = await db.db.appointments.find_one(
        {"_id": ObjectId(appointment_id), "archived": {"$ne": True}}
    )
    return _with_id(appointment)

async def require_appointment(appointment_id: str) -> Dict[str, Any]:
    appointment = await get_appointment_by_id(appointment_id)
    if not appointment:
        raise NotFoundError("Appointment", appointment_id)
    return appointment

async def get_day_appointments(staff_id: str, day: str) -> List[Dict[str, Any]]:
    """
    All non-archived appointments for a staff member on a date, cancelled included
    """
    cursor = db.db.appointments.find(
        {"staffId": staff_id, "date": day, "archived": {"$ne": True}}
    ).sort("time", 1)
    appointments = await cursor.to_list(length=None)
    return [_with_id(appointment) for appointment in appointments]

async def get_appointments(
    staff_id: Optional[str] = None,
    day: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    client_id: Optional[str] = None,
    skip: int = 0,
    limit: int = 100
) -> List[Dict[str, Any]]:
    """
    List appointments ordered by date and time
    """
    query: Dict[str, Any] = {"archived": {"$ne": True}}

    if staff_id:
        query["staffId"] = staff_id
    if day:
        query["date"] = day
    if status:
        query["status"] = status.value
    if client_id:
        query["clientId"] = client_id

    cursor = db.db.appointments.find(query).sort([("date", 1), ("time", 1)]).skip(skip).limit(limit)
    appointments = await cursor.to_list(length=limit)
    return [_with_id(appointment) for appointment in appointments]

async def get_available_slots(staff_id: str, service_id: str, day: date) -> List[str]:
    """
    Bookable start times for a staff member and service on a date.

    Past dates have no slots; for today, slots that have already started
    are dropped.
    """
    staff = await require_staff(staff_id)
    service = await require_service(service_id)
    return await _offered_slots(staff, service, day)

async def _offered_slots(staff: Dict[str, Any], service: Dict[str, Any], day: date) -> List[str]:
    now = salon_now()
    if day < now.date():
        return []

    day_key = day.isoformat()
    appointments = await get_day_appointments(staff["id"], day_key)
    slots = availability.generate_available_time_slots(
        day_key, staff, service, appointments,
        interval=settings.SLOT_INTERVAL_MINUTES,
        default_duration=settings.DEFAULT_APPOINTMENT_MINUTES,
    )

    if day == now.date():
        now_minutes = now.hour * 60 + now.minute
        slots = [slot for slot in slots if availability.time_to_minutes(slot) >= now_minutes]

    return slots

async def check_slot(
    staff_id: str,
    service_id: str,
    day: date,
    time: str,
    exclude_appointment_id: Optional[str] = None
) -> bool:
    """
    Check a single start time, optionally ignoring one appointment (edit flow)
    """
    staff = await require_staff(staff_id)
    service = await require_service(service_id)

    day_key = day.isoformat()
    appointments = await get_day_appointments(staff["id"], day_key)
    if exclude_appointment_id:
        appointments = [a for a in appointments if a["id"] != exclude_appointment_id]

    return availability.is_time_slot_available(
        time, service["duration"], appointments, staff["id"], day_key,
        default_duration=settings.DEFAULT_APPOINTMENT_MINUTES,
    )

def _held_ranges(appointment: Dict[str, Any], day: str) -> List[Tuple[int, int]]:
    """(start, end) minute ranges an appointment holds on day, including a move in progress."""
    ranges = []
    if appointment.get("date") == day:
        ranges.append((
            availability.time_to_minutes(appointment["time"]),
            availability.appointment_end_minutes(appointment, settings.DEFAULT_APPOINTMENT_MINUTES),
        ))
    pending = appointment.get("pendingMove")
    if pending and pending.get("date") == day:
        ranges.append((
            availability.time_to_minutes(pending["time"]),
            availability.time_to_minutes(pending["endTime"]),
        ))
    return ranges

async def _claim_holds(
    appointment_oid: ObjectId,
    staff_id: str,
    day: str,
    time: str,
    end_time: str
) -> bool:
    """
    Re-read the day after a claim was written and decide whether it stands.

    The claim stands only if no other live appointment overlaps it, whichever
    was written first.
    """
    start = availability.time_to_minutes(time)
    end = availability.time_to_minutes(end_time)

    cursor = db.db.appointments.find({
        "_id": {"$ne": appointment_oid},
        "staffId": staff_id,
        "archived": {"$ne": True},
        "status": {"$ne": availability.CANCELLED},
        "$or": [{"date": day}, {"pendingMove.date": day}],
    })
    for other in await cursor.to_list(length=None):
        for other_start, other_end in _held_ranges(other, day):
            if other_start < end and start < other_end:
                return False
    return True

async def reserve_appointment(appointment_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Insert an appointment if its slot is free, guarding against a concurrent claim.

    appointment_data must carry staffId, date, time and endTime.
    """
    staff_id = appointment_data["staffId"]
    day = appointment_data["date"]
    time = appointment_data["time"]
    duration = (
        availability.time_to_minutes(appointment_data["endTime"])
        - availability.time_to_minutes(time)
    )

    existing = await get_day_appointments(staff_id, day)
    if not availability.is_time_slot_available(
        time, duration, existing, staff_id, day,
        default_duration=settings.DEFAULT_APPOINTMENT_MINUTES,
    ):
        logger.warning(f"Rejected booking for staff {staff_id} on {day} at {time}: slot taken")
        raise SlotUnavailableError(staff_id, day, time)

    result = await db.db.appointments.insert_one(appointment_data)

    if not await _claim_holds(result.inserted_id, staff_id, day, time, appointment_data["endTime"]):
        await db.db.appointments.delete_one({"_id": result.inserted_id})
        logger.warning(f"Lost concurrent booking for staff {staff_id} on {day} at {time}")
        raise SlotUnavailableError(staff_id, day, time)

    created = await db.db.appointments.find_one({"_id": result.inserted_id})
    logger.info(
        f"Booked appointment {result.inserted_id} for staff {staff_id} on {day} "
        f"{time}-{appointment_data['endTime']}"
    )
    return _with_id(created)

async def book_appointment(
    appointment_in: AppointmentCreate,
    is_call_in: bool = False,
    is_work_in_approval: bool = False,
    original_request_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Book an appointment for a customer (self-service, call-in or work-in approval).

    Customers may only pick one of the offered slots. Call-ins and approved
    work-ins are booked by staff and may fall outside working hours.
    """
    staff = await require_staff(appointment_in.staffId)
    service = await require_service(appointment_in.serviceId)

    # Validates the time before a customer record is created
    end_time = availability.get_appointment_end_time(appointment_in.time, service["duration"])

    if not (is_call_in or is_work_in_approval):
        offered = await _offered_slots(staff, service, appointment_in.date)
        if appointment_in.time not in offered:
            logger.info(
                f"Rejected self-booking for staff {staff['id']} on {appointment_in.date} "
                f"at {appointment_in.time}: not an offered slot"
            )
            raise SlotUnavailableError(
                staff["id"], appointment_in.date.isoformat(), appointment_in.time,
                "This time is not offered for online booking. "
                "Please pick an available slot or send a work-in request."
            )

    customer = await find_or_create_customer(appointment_in.customerInfo)

    now = datetime.utcnow()
    appointment_data = {
        "clientId": customer["id"],
        "staffId": staff["id"],
        "serviceId": service["id"],
        "date": appointment_in.date.isoformat(),
        "time": appointment_in.time,
        "endTime": end_time,
        "status": AppointmentStatus.CONFIRMED.value,
        "notes": appointment_in.notes,
        "isCallIn": is_call_in,
        "isWorkInApproval": is_work_in_approval,
        "originalRequestId": original_request_id,
        "archived": False,
        "createdAt": now,
    }
    return await reserve_appointment(appointment_data)

async def update_appointment(
    appointment_id: str,
    appointment_update: AppointmentUpdate
) -> Dict[str, Any]:
    """
    Move an appointment and/or change its notes.

    A new date or time is re-validated without the appointment itself and
    the end time is recomputed from the service duration. The appointment
    keeps its current slot until the new one is confirmed.
    """
    appointment = await require_appointment(appointment_id)
    update_data = appointment_update.model_dump(exclude_unset=True, exclude_none=True)

    new_day = update_data.get("date")
    new_day = new_day.isoformat() if new_day else appointment["date"]
    new_time = update_data.get("time", appointment["time"])
    is_move = new_day != appointment["date"] or new_time != appointment["time"]

    changes: Dict[str, Any] = {"updatedAt": datetime.utcnow()}
    if "notes" in update_data:
        changes["notes"] = update_data["notes"]

    if is_move:
        if appointment["status"] in CLOSED_STATUSES:
            raise InvalidStateError("Cancelled appointments cannot be rescheduled")

        service = await require_service(appointment["serviceId"], active_only=False)
        end_time = availability.get_appointment_end_time(new_time, service["duration"])

        others = [
            a for a in await get_day_appointments(appointment["staffId"], new_day)
            if a["id"] != appointment["id"]
        ]
        if not availability.is_time_slot_available(
            new_time, service["duration"], others, appointment["staffId"], new_day,
            default_duration=settings.DEFAULT_APPOINTMENT_MINUTES,
        ):
            raise SlotUnavailableError(appointment["staffId"], new_day, new_time)

    oid = ObjectId(appointment_id)

    if not is_move:
        await db.db.appointments.update_one({"_id": oid}, {"$set": changes})
        return await require_appointment(appointment_id)

    pending = {"date": new_day, "time": new_time, "endTime": end_time}
    await db.db.appointments.update_one({"_id": oid}, {"$set": {"pendingMove": pending}})

    if not await _claim_holds(oid, appointment["staffId"], new_day, new_time, end_time):
        await db.db.appointments.update_one({"_id": oid}, {"$unset": {"pendingMove": ""}})
        logger.warning(
            f"Lost concurrent move of appointment {appointment_id} to {new_day} {new_time}"
        )
        raise SlotUnavailableError(appointment["staffId"], new_day, new_time)

    changes.update(pending)
    await db.db.appointments.update_one(
        {"_id": oid},
        {"$set": changes, "$unset": {"pendingMove": ""}}
    )
    logger.info(
        f"Moved appointment {appointment_id} from {appointment['date']} {appointment['time']} "
        f"to {new_day} {new_time}"
    )
    return await require_appointment(appointment_id)

async def cancel_appointment(appointment_id: str, reason: Optional[str] = None) -> Dict[str, Any]:
    """
    Cancel an appointment, freeing its slot
    """
    appointment = await require_appointment(appointment_id)

    if appointment["status"] != AppointmentStatus.CONFIRMED.value:
        raise InvalidStateError(f"Cannot cancel an appointment that is {appointment['status']}")

    update_data: Dict[str, Any] = {
        "status": AppointmentStatus.CANCELLED.value,
        "updatedAt": datetime.utcnow()
    }
    if reason:
        update_data["cancellationReason"] = reason

    await db.db.appointments.update_one(
        {"_id": ObjectId(appointment_id)},
        {"$set": update_data}
    )
    logger.info(f"Cancelled appointment {appointment_id}")
    return await require_appointment(appointment_id)

async def set_appointment_status(appointment_id: str, new_status: AppointmentStatus) -> Dict[str, Any]:
    """
    Mark an appointment completed, no-show or back to confirmed.

    Cancelling goes through cancel_appointment; a cancelled appointment
    cannot be re-opened here because its slot may have been re-booked.
    """
    appointment = await require_appointment(appointment_id)

    if new_status == AppointmentStatus.CANCELLED:
        return await cancel_appointment(appointment_id)
    if appointment["status"] in CLOSED_STATUSES:
        raise InvalidStateError("Cancelled appointments cannot change status")

    await db.db.appointments.update_one(
        {"_id": ObjectId(appointment_id)},
        {"$set": {"status": new_status.value, "updatedAt": datetime.utcnow()}}
    )

    if new_status == AppointmentStatus.COMPLETED:
        await record_visit(appointment["clientId"], appointment["date"])

    logger.info(f"Appointment {appointment_id} marked {new_status.value}")
    return await require_appointment(appointment_id)

async def archive_appointment(appointment_id: str) -> bool:
    """
    Soft-delete an appointment. Archived appointments never block a slot.
    """
    appointment = await get_appointment_by_id(appointment_id)
    if not appointment:
        return False

    await db.db.appointments.update_one(
        {"_id": ObjectId(appointment_id)},
        {"$set": {"archived": True, "archivedAt": datetime.utcnow()}}
    )
    logger.info(f"Archived appointment {appointment_id}")
    return True
