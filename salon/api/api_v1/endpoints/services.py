from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from salon.core.auth import require_admin
from salon.schemas.service import ServiceCreate, ServiceResponse, ServiceUpdate
from salon.services.catalog_service import (
    create_service, deactivate_service, get_service_by_id, get_services, update_service
)

router = APIRouter()

@router.get("/", response_model=List[ServiceResponse])
async def list_services(
    category: Optional[str] = Query(None, description="Filter by category"),
    includeInactive: bool = Query(False, description="Include retired services")
):
    """
    List the salon's services
    """
    return await get_services(category=category, include_inactive=includeInactive)

@router.post("/", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def add_service(
    service_in: ServiceCreate,
    current_user: dict = Depends(require_admin)
):
    """
    Add a service (admin only)
    """
    return await create_service(service_in)

@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: str):
    """
    Get a service by ID
    """
    service = await get_service_by_id(service_id)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service

@router.put("/{service_id}", response_model=ServiceResponse)
async def edit_service(
    service_id: str,
    service_update: ServiceUpdate,
    current_user: dict = Depends(require_admin)
):
    """
    Update a service (admin only)
    """
    service = await update_service(service_id, service_update)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service

@router.delete("/{service_id}", response_model=ServiceResponse)
async def remove_service(
    service_id: str,
    current_user: dict = Depends(require_admin)
):
    """
    Retire a service (admin only)
    """
    service = await deactivate_service(service_id)
    if not service:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Service not found"
        )
    return service
