import email_validator
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from main import app
from salon.core.auth import create_access_token
from salon.db.mongodb import db
from salon.schemas.service import ServiceCreate
from salon.schemas.staff import StaffCreate
from salon.schemas.user import UserCreate
from salon.services.catalog_service import create_service
from salon.services.staff_service import create_staff
from salon.services.user_service import create_user

# Test fixtures use the reserved .test domain; enable email-validator's
# documented test mode so it accepts them.
email_validator.TEST_ENVIRONMENT = True

# Far-future dates so "today" never filters them out
MONDAY = "2099-01-05"
SUNDAY = "2099-01-04"

test_staff = {
    "name": "Jamie Rivera",
    "phone": "+15550100",
    "bio": "Color specialist",
    "specialties": ["Color", "Cuts"],
    "availability": {
        "monday": {"start": "09:00", "end": "17:00", "available": True},
        "tuesday": {"start": "09:00", "end": "17:00", "available": True},
        "wednesday": {"start": "09:00", "end": "17:00", "available": True},
        "thursday": {"start": "12:00", "end": "20:00", "available": True},
        "friday": {"start": "09:00", "end": "17:00", "available": True},
        "saturday": {"start": "10:00", "end": "14:00", "available": True},
        "sunday": {"start": "09:00", "end": "17:00", "available": False},
    },
}

test_service = {
    "name": "Cut & Style",
    "duration": 60,
    "price": 55.0,
    "category": "Hair",
}

test_customer = {
    "name": "Alex Morgan",
    "phone": "+15550123",
    "notes": "",
}

@pytest.fixture(autouse=True)
def mongo():
    """Point the shared db holder at a fresh in-memory database."""
    db.client = AsyncMongoMockClient()
    db.db = db.client["salon_test"]
    yield db.db
    db.client = None
    db.db = None

@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

@pytest_asyncio.fixture
async def admin_user():
    return await create_user(UserCreate(
        email="owner@salon.test",
        fullName="Salon Owner",
        password="OwnerPass123",
        role="admin",
    ))

@pytest_asyncio.fixture
async def admin_headers(admin_user):
    token = create_access_token({"sub": admin_user["id"], "role": "admin"})
    return {"Authorization": f"Bearer {token}"}

@pytest_asyncio.fixture
async def staff_member():
    return await create_staff(StaffCreate(**test_staff))

@pytest_asyncio.fixture
async def service():
    return await create_service(ServiceCreate(**test_service))

@pytest_asyncio.fixture
async def stylist_headers(staff_member):
    user = await create_user(UserCreate(
        email="jamie@salon.test",
        fullName="Jamie Rivera",
        password="StylistPass123",
        role="staff",
        staffId=staff_member["id"],
    ))
    token = create_access_token({"sub": user["id"], "role": "staff"})
    return {"Authorization": f"Bearer {token}"}

def booking_payload(staff_member, service, time, date=MONDAY, customer=None):
    return {
        "customerInfo": customer or test_customer,
        "staffId": staff_member["id"],
        "serviceId": service["id"],
        "date": date,
        "time": time,
    }
