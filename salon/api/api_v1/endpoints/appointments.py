from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Any, Dict, List, Optional
from datetime import date as CalendarDate

from salon.core.auth import get_current_user, require_admin, ensure_staff_access
from salon.schemas.appointment import (
    AppointmentCancel, AppointmentCreate, AppointmentResponse,
    AppointmentStatus, AppointmentStatusUpdate, AppointmentUpdate
)
from salon.services.appointment_service import (
    archive_appointment, book_appointment, cancel_appointment, get_appointments,
    require_appointment, set_appointment_status, update_appointment
)

router = APIRouter()

@router.post("/", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_customer_appointment(appointment_in: AppointmentCreate):
    """
    Book an appointment as a customer.

    Responds 409 when the time is no longer free.
    """
    return await book_appointment(appointment_in)

@router.post("/call-in", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def create_call_in_appointment(
    appointment_in: AppointmentCreate,
    current_user: dict = Depends(require_admin)
):
    """
    Book an appointment taken over the phone (admin only)
    """
    return await book_appointment(appointment_in, is_call_in=True)

@router.get("/", response_model=List[AppointmentResponse])
async def list_appointments(
    staffId: Optional[str] = Query(None),
    date: Optional[CalendarDate] = Query(None, description="Date in YYYY-MM-DD format"),
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    List appointments. Staff accounts only see their own.
    """
    if current_user.get("role") != "admin":
        staffId = current_user.get("staffId")
        if not staffId:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="This account is not linked to a staff member"
            )

    return await get_appointments(
        staff_id=staffId,
        day=date.isoformat() if date else None,
        status=status_filter,
        skip=skip,
        limit=limit
    )

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Get an appointment (admin or the assigned staff member)
    """
    appointment = await require_appointment(appointment_id)
    ensure_staff_access(current_user, appointment["staffId"])
    return appointment

@router.put("/{appointment_id}", response_model=AppointmentResponse)
async def edit_appointment(
    appointment_id: str,
    appointment_update: AppointmentUpdate,
    current_user: dict = Depends(require_admin)
):
    """
    Move an appointment or change its notes (admin only)
    """
    return await update_appointment(appointment_id, appointment_update)

@router.post("/{appointment_id}/cancel", response_model=AppointmentResponse)
async def cancel_appointment_endpoint(
    appointment_id: str,
    cancel: Optional[AppointmentCancel] = None,
    current_user: dict = Depends(require_admin)
):
    """
    Cancel an appointment (admin only)
    """
    reason = cancel.reason if cancel else None
    return await cancel_appointment(appointment_id, reason)

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    status_update: AppointmentStatusUpdate,
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Mark an appointment completed or no-show (admin or the assigned staff member)
    """
    appointment = await require_appointment(appointment_id)
    ensure_staff_access(current_user, appointment["staffId"])
    return await set_appointment_status(appointment_id, status_update.status)

@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: str,
    current_user: dict = Depends(require_admin)
):
    """
    Archive an appointment (admin only)
    """
    if not await archive_appointment(appointment_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )
