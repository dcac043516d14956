from typing import Dict, Any, List, Optional
from salon.db.mongodb import db
from salon.schemas.service import ServiceCreate, ServiceUpdate
from salon.services.errors import NotFoundError
from datetime import datetime
from bson import ObjectId
import logging

logger = logging.getLogger(__name__)

def _with_id(service: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if service:
        service["id"] = str(service["_id"])
    return service

async def create_service(service_in: ServiceCreate) -> Dict[str, Any]:
    """
    Add a service to the salon menu
    """
    service_data = service_in.model_dump()
    service_data["createdAt"] = datetime.utcnow()

    result = await db.db.services.insert_one(service_data)
    created_service = await db.db.services.find_one({"_id": result.inserted_id})
    logger.info(f"Created service {result.inserted_id} ({service_in.name}, {service_in.duration} min)")
    return _with_id(created_service)

async def get_service_by_id(service_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a service by ID
    """
    if not ObjectId.is_valid(service_id):
        return None
    service = await db.db.services.find_one({"_id": ObjectId(service_id)})
    return _with_id(service)

async def require_service(service_id: str, active_only: bool = True) -> Dict[str, Any]:
    """Get a service or raise NotFoundError."""
    service = await get_service_by_id(service_id)
    if not service or (active_only and not service.get("isActive", True)):
        raise NotFoundError("Service", service_id)
    return service

async def get_services(
    category: Optional[str] = None,
    include_inactive: bool = False
) -> List[Dict[str, Any]]:
    """
    List services, optionally by category
    """
    query: Dict[str, Any] = {}
    if not include_inactive:
        query["isActive"] = True
    if category:
        query["category"] = category

    cursor = db.db.services.find(query).sort([("category", 1), ("name", 1)])
    services = await cursor.to_list(length=None)
    return [_with_id(service) for service in services]

async def update_service(service_id: str, service_update: ServiceUpdate) -> Optional[Dict[str, Any]]:
    """
    Update a service. Existing appointments keep their stored end time.
    """
    service = await get_service_by_id(service_id)
    if not service:
        return None

    update_data = service_update.model_dump(exclude_unset=True, exclude_none=True)

    if update_data:
        update_data["updatedAt"] = datetime.utcnow()
        await db.db.services.update_one(
            {"_id": ObjectId(service_id)},
            {"$set": update_data}
        )

    return await get_service_by_id(service_id)

async def deactivate_service(service_id: str) -> Optional[Dict[str, Any]]:
    """
    Hide a service from booking without deleting it
    """
    service = await get_service_by_id(service_id)
    if not service:
        return None

    await db.db.services.update_one(
        {"_id": ObjectId(service_id)},
        {"$set": {"isActive": False, "updatedAt": datetime.utcnow()}}
    )
    logger.info(f"Deactivated service {service_id}")
    return await get_service_by_id(service_id)
