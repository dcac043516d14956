from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from salon.core.config import settings
import logging

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None
    db = None

db = Database()

async def connect_to_mongo():
    """Connect to MongoDB."""
    try:
        logger.info("Connecting to MongoDB...")
        db.client = AsyncIOMotorClient(settings.MONGO_URI)
        db.db = db.client[settings.DB_NAME]
        logger.info("Connected to MongoDB.")

        # Create indexes for collections
        await create_indexes()

    except Exception as e:
        logger.error(f"Could not connect to MongoDB: {e}")
        raise e

async def close_mongo_connection():
    """Close MongoDB connection."""
    if db.client:
        logger.info("Closing MongoDB connection...")
        db.client.close()
        logger.info("MongoDB connection closed.")

async def get_database():
    """Get MongoDB database instance."""
    return db.db

async def create_indexes():
    """Create indexes for collections."""
    try:
        # Admin / staff accounts
        await db.db.users.create_index("email", unique=True)

        # Customers are matched on name + phone when booking
        await db.db.customers.create_index([("name", ASCENDING), ("phone", ASCENDING)])

        # Appointments are always read per staff member and day
        await db.db.appointments.create_index(
            [("staffId", ASCENDING), ("date", ASCENDING), ("archived", ASCENDING)]
        )
        await db.db.appointments.create_index("clientId")
        # Moves in progress are claimed on their target date
        await db.db.appointments.create_index([("staffId", ASCENDING), ("pendingMove.date", ASCENDING)])
        await db.db.appointments.create_index([("date", ASCENDING), ("time", ASCENDING)])

        await db.db.workInRequests.create_index([("status", ASCENDING), ("requestTime", ASCENDING)])
        await db.db.workInRequests.create_index("staffId")

        logger.info("MongoDB indexes created successfully.")
    except Exception as e:
        logger.error(f"Failed to create MongoDB indexes: {e}")
