from typing import Dict, Any, List, Optional
from salon.db.mongodb import db
from salon.schemas.staff import StaffCreate, StaffUpdate, DayAvailability
from salon.services.errors import NotFoundError
from datetime import datetime
from bson import ObjectId
import logging

logger = logging.getLogger(__name__)

def _with_id(staff: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if staff:
        staff["id"] = str(staff["_id"])
    return staff

async def create_staff(staff_in: StaffCreate) -> Dict[str, Any]:
    """
    Create a new staff member
    """
    staff_data = staff_in.model_dump()
    staff_data["createdAt"] = datetime.utcnow()

    result = await db.db.staff.insert_one(staff_data)
    created_staff = await db.db.staff.find_one({"_id": result.inserted_id})
    logger.info(f"Created staff member {result.inserted_id} ({staff_in.name})")
    return _with_id(created_staff)

async def get_staff_by_id(staff_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a staff member by ID
    """
    if not ObjectId.is_valid(staff_id):
        return None
    staff = await db.db.staff.find_one({"_id": ObjectId(staff_id)})
    return _with_id(staff)

async def require_staff(staff_id: str, active_only: bool = True) -> Dict[str, Any]:
    """Get a staff member or raise NotFoundError."""
    staff = await get_staff_by_id(staff_id)
    if not staff or (active_only and not staff.get("isActive", True)):
        raise NotFoundError("Staff member", staff_id)
    return staff

async def get_all_staff(include_inactive: bool = False) -> List[Dict[str, Any]]:
    """
    Get all staff members, active ones only unless asked otherwise
    """
    query = {} if include_inactive else {"isActive": True}
    cursor = db.db.staff.find(query).sort("name", 1)
    staff_members = await cursor.to_list(length=None)
    return [_with_id(staff) for staff in staff_members]

async def update_staff(staff_id: str, staff_update: StaffUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a staff member
    """
    staff = await get_staff_by_id(staff_id)
    if not staff:
        return None

    # Update only provided fields
    update_data = staff_update.model_dump(exclude_unset=True, exclude_none=True)

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.staff.update_one(
            {"_id": ObjectId(staff_id)},
            {"$set": update_data}
        )

    return await get_staff_by_id(staff_id)

async def update_day_availability(
    staff_id: str,
    day: str,
    day_availability: DayAvailability
) -> Optional[Dict[str, Any]]:
    """
    Replace the working hours for a single day of the week
    """
    staff = await get_staff_by_id(staff_id)
    if not staff:
        return None

    await db.db.staff.update_one(
        {"_id": ObjectId(staff_id)},
        {"$set": {
            f"availability.{day}": day_availability.model_dump(),
            "updatedAt": datetime.utcnow()
        }}
    )
    logger.info(f"Updated {day} availability for staff member {staff_id}")
    return await get_staff_by_id(staff_id)

async def deactivate_staff(staff_id: str) -> Optional[Dict[str, Any]]:
    """
    Deactivate a staff member; their appointments are kept
    """
    staff = await get_staff_by_id(staff_id)
    if not staff:
        return None

    await db.db.staff.update_one(
        {"_id": ObjectId(staff_id)},
        {"$set": {"isActive": False, "updatedAt": datetime.utcnow()}}
    )
    logger.info(f"Deactivated staff member {staff_id}")
    return await get_staff_by_id(staff_id)
