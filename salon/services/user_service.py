from typing import Dict, Any, Optional
from salon.db.mongodb import db
from salon.schemas.user import UserCreate
from salon.core.auth import get_password_hash, verify_password
from datetime import datetime
from bson import ObjectId

async def create_user(user_in: UserCreate) -> Dict[str, Any]:
    """
    Create a new admin or staff account
    """
    # Create user with hashed password
    user_data = user_in.model_dump()
    user_data["email"] = user_in.email.lower()
    user_data["role"] = user_in.role.value
    user_data["password"] = get_password_hash(user_data["password"])
    user_data["createdAt"] = datetime.utcnow()
    user_data["isActive"] = True

    # Insert user into database
    result = await db.db.users.insert_one(user_data)

    # Get the created user
    created_user = await db.db.users.find_one({"_id": result.inserted_id})

    # Transform the _id field to string
    created_user["id"] = str(created_user["_id"])

    return created_user

async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """
    Get a user by email
    """
    user = await db.db.users.find_one({"email": email.lower()})
    if user:
        user["id"] = str(user["_id"])
    return user

async def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a user by ID
    """
    if not ObjectId.is_valid(user_id):
        return None
    user = await db.db.users.find_one({"_id": ObjectId(user_id)})
    if user:
        user["id"] = str(user["_id"])
    return user

async def authenticate_user(email: str, password: str) -> Optional[Dict[str, Any]]:
    """
    Check credentials and stamp lastLogin
    """
    user = await get_user_by_email(email)
    if not user or not user.get("isActive", True):
        return None
    if not verify_password(password, user["password"]):
        return None

    now = datetime.utcnow()
    await db.db.users.update_one({"_id": user["_id"]}, {"$set": {"lastLogin": now}})
    user["lastLogin"] = now
    return user
