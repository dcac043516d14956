from typing import Dict, Any, List, Optional
from salon.db.mongodb import db
from salon.schemas.appointment import AppointmentCreate
from salon.schemas.customer import CustomerInfo
from salon.schemas.work_in import WorkInDecision, WorkInRequestCreate, WorkInStatus
from salon.services.appointment_service import book_appointment
from salon.services.catalog_service import require_service
from salon.services.errors import InvalidStateError, NotFoundError
from salon.services.staff_service import require_staff
from datetime import datetime, date
from bson import ObjectId
import logging

logger = logging.getLogger(__name__)

def _with_id(request: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if request:
        request["id"] = str(request["_id"])
    return request

async def create_work_in_request(request_in: WorkInRequestCreate) -> Dict[str, Any]:
    """
    Record a customer's request for a time outside the offered slots
    """
    staff = await require_staff(request_in.staffId)
    service = await require_service(request_in.serviceId)

    request_data = {
        "staffId": staff["id"],
        "serviceId": service["id"],
        "requestedDate": request_in.requestedDate.isoformat(),
        "requestedTime": request_in.requestedTime,
        "customerInfo": request_in.customerInfo.model_dump(),
        "status": WorkInStatus.PENDING.value,
        "notes": request_in.notes,
        "requestTime": datetime.utcnow(),
    }
    result = await db.db.workInRequests.insert_one(request_data)
    logger.info(
        f"Work-in request {result.inserted_id} for staff {staff['id']} on "
        f"{request_data['requestedDate']} at {request_in.requestedTime}"
    )

    created_request = await db.db.workInRequests.find_one({"_id": result.inserted_id})
    return _with_id(created_request)

async def get_work_in_request_by_id(request_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a work-in request by ID
    """
    if not ObjectId.is_valid(request_id):
        return None
    request = await db.db.workInRequests.find_one({"_id": ObjectId(request_id)})
    return _with_id(request)

async def get_work_in_requests(
    status: Optional[WorkInStatus] = None,
    staff_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """
    List work-in requests, newest first
    """
    query: Dict[str, Any] = {}
    if status:
        query["status"] = status.value
    if staff_id:
        query["staffId"] = staff_id

    cursor = db.db.workInRequests.find(query).sort("requestTime", -1)
    requests = await cursor.to_list(length=None)
    return [_with_id(request) for request in requests]

async def respond_to_work_in_request(request_id: str, decision: WorkInDecision) -> Dict[str, Any]:
    """
    Approve or deny a pending work-in request.

    Approving books a real appointment at decision.time, which is checked
    against the staff member's existing appointments like any other booking.
    """
    request = await get_work_in_request_by_id(request_id)
    if not request:
        raise NotFoundError("Work-in request", request_id)

    if request["status"] != WorkInStatus.PENDING.value:
        raise InvalidStateError(f"Work-in request is already {request['status']}")
    if decision.status == WorkInStatus.PENDING:
        raise InvalidStateError("A response must approve or deny the request")

    update_data: Dict[str, Any] = {
        "status": decision.status.value,
        "responseNotes": decision.notes,
        "responseTime": datetime.utcnow(),
    }

    if decision.status == WorkInStatus.APPROVED:
        if not decision.time:
            raise InvalidStateError("Please select a time for the approved work-in")

        appointment = await book_appointment(
            AppointmentCreate(
                customerInfo=CustomerInfo(**request["customerInfo"]),
                staffId=request["staffId"],
                serviceId=request["serviceId"],
                date=date.fromisoformat(request["requestedDate"]),
                time=decision.time,
                notes=decision.notes or request.get("notes", ""),
            ),
            is_work_in_approval=True,
            original_request_id=request["id"],
        )
        update_data["appointmentId"] = appointment["id"]

    await db.db.workInRequests.update_one(
        {"_id": ObjectId(request_id)},
        {"$set": update_data}
    )
    logger.info(f"Work-in request {request_id} {decision.status.value}")
    return await get_work_in_request_by_id(request_id)
