from fastapi import APIRouter
from salon.api.api_v1.endpoints import auth, staff, services, customers, availability, appointments, work_in

router = APIRouter()

# Include all routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(staff.router, prefix="/staff", tags=["Staff"])
router.include_router(services.router, prefix="/services", tags=["Services"])
router.include_router(customers.router, prefix="/customers", tags=["Customers"])
router.include_router(availability.router, prefix="/availability", tags=["Availability"])
router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
router.include_router(work_in.router, prefix="/work-in-requests", tags=["Work-in Requests"])
