from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from salon.core.auth import require_admin
from salon.schemas.appointment import AppointmentResponse
from salon.schemas.customer import CustomerResponse
from salon.services.appointment_service import get_appointments
from salon.services.customer_service import get_customer_by_id, get_customers

router = APIRouter(dependencies=[Depends(require_admin)])

@router.get("/", response_model=List[CustomerResponse])
async def list_customers(
    search: Optional[str] = Query(None, description="Match on customer name or phone"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200)
):
    """
    List customers (admin only)
    """
    return await get_customers(search=search, skip=skip, limit=limit)

@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: str):
    """
    Get a customer (admin only)
    """
    customer = await get_customer_by_id(customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    return customer

@router.get("/{customer_id}/appointments", response_model=List[AppointmentResponse])
async def get_customer_appointments(customer_id: str):
    """
    A customer's appointment history (admin only)
    """
    customer = await get_customer_by_id(customer_id)
    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Customer not found"
        )
    return await get_appointments(client_id=customer["id"])
