from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from salon.core.auth import require_admin
from salon.schemas.work_in import (
    WorkInDecision, WorkInRequestCreate, WorkInRequestResponse, WorkInStatus
)
from salon.services.work_in_service import (
    create_work_in_request, get_work_in_request_by_id,
    get_work_in_requests, respond_to_work_in_request
)

router = APIRouter()

@router.post("/", response_model=WorkInRequestResponse, status_code=status.HTTP_201_CREATED)
async def request_work_in(request_in: WorkInRequestCreate):
    """
    Ask for a time that is not offered as a regular slot
    """
    return await create_work_in_request(request_in)

@router.get("/", response_model=List[WorkInRequestResponse])
async def list_work_in_requests(
    status_filter: Optional[WorkInStatus] = Query(None, alias="status"),
    staffId: Optional[str] = Query(None),
    current_user: dict = Depends(require_admin)
):
    """
    List work-in requests, newest first (admin only)
    """
    return await get_work_in_requests(status=status_filter, staff_id=staffId)

@router.get("/{request_id}", response_model=WorkInRequestResponse)
async def get_work_in_request(
    request_id: str,
    current_user: dict = Depends(require_admin)
):
    """
    Get a work-in request (admin only)
    """
    request = await get_work_in_request_by_id(request_id)
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Work-in request not found"
        )
    return request

@router.post("/{request_id}/respond", response_model=WorkInRequestResponse)
async def respond_to_work_in(
    request_id: str,
    decision: WorkInDecision,
    current_user: dict = Depends(require_admin)
):
    """
    Approve (with a time) or deny a pending work-in request (admin only)
    """
    return await respond_to_work_in_request(request_id, decision)
