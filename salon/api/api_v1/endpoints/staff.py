from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Any, Dict, List

from salon.core.auth import get_current_user, require_admin, ensure_staff_access
from salon.schemas.staff import (
    DAYS_OF_WEEK, DayAvailability, StaffCreate, StaffResponse, StaffUpdate, WeeklyAvailability
)
from salon.services.staff_service import (
    create_staff, deactivate_staff, get_all_staff, get_staff_by_id,
    update_day_availability, update_staff
)

router = APIRouter()

def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Staff member not found"
    )

@router.get("/", response_model=List[StaffResponse])
async def list_staff(
    includeInactive: bool = Query(False, description="Include deactivated staff")
):
    """
    List staff members
    """
    return await get_all_staff(include_inactive=includeInactive)

@router.post("/", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
async def add_staff(
    staff_in: StaffCreate,
    current_user: dict = Depends(require_admin)
):
    """
    Add a staff member (admin only)
    """
    return await create_staff(staff_in)

@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff(staff_id: str):
    """
    Get a staff member
    """
    staff = await get_staff_by_id(staff_id)
    if not staff:
        raise _not_found()
    return staff

@router.put("/{staff_id}", response_model=StaffResponse)
async def edit_staff(
    staff_id: str,
    staff_update: StaffUpdate,
    current_user: dict = Depends(require_admin)
):
    """
    Update a staff member (admin only)
    """
    staff = await update_staff(staff_id, staff_update)
    if not staff:
        raise _not_found()
    return staff

@router.delete("/{staff_id}", response_model=StaffResponse)
async def remove_staff(
    staff_id: str,
    current_user: dict = Depends(require_admin)
):
    """
    Deactivate a staff member (admin only). Existing appointments are kept.
    """
    staff = await deactivate_staff(staff_id)
    if not staff:
        raise _not_found()
    return staff

@router.get("/{staff_id}/availability", response_model=WeeklyAvailability)
async def get_staff_availability(staff_id: str):
    """
    Get a staff member's weekly working hours
    """
    staff = await get_staff_by_id(staff_id)
    if not staff:
        raise _not_found()
    return staff.get("availability") or WeeklyAvailability()

@router.put("/{staff_id}/availability/{day}", response_model=WeeklyAvailability)
async def set_day_availability(
    staff_id: str,
    day: str,
    day_availability: DayAvailability,
    current_user: Dict[str, Any] = Depends(get_current_user)
):
    """
    Set working hours for one day of the week (admin or the staff member)
    """
    day = day.lower()
    if day not in DAYS_OF_WEEK:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid day. Must be one of: {', '.join(DAYS_OF_WEEK)}"
        )

    ensure_staff_access(current_user, staff_id)

    staff = await update_day_availability(staff_id, day, day_availability)
    if not staff:
        raise _not_found()
    return staff["availability"]
