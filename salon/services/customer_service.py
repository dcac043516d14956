from typing import Dict, Any, List, Optional
from salon.db.mongodb import db
from salon.schemas.customer import CustomerInfo
from datetime import datetime
from bson import ObjectId
import logging
import re

logger = logging.getLogger(__name__)

def _with_id(customer: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if customer:
        customer["id"] = str(customer["_id"])
    return customer

async def find_or_create_customer(customer_info: CustomerInfo) -> Dict[str, Any]:
    """
    Find a customer by name and phone, creating one if none matches
    """
    name = customer_info.name.strip()
    phone = customer_info.phone.strip()

    customer = await db.db.customers.find_one({"name": name, "phone": phone})
    if customer:
        return _with_id(customer)

    customer_data = {
        "name": name,
        "phone": phone,
        "notes": customer_info.notes,
        "lastVisit": None,
        "createdAt": datetime.utcnow(),
    }
    result = await db.db.customers.insert_one(customer_data)
    logger.info(f"Created customer {result.inserted_id} ({name})")

    created_customer = await db.db.customers.find_one({"_id": result.inserted_id})
    return _with_id(created_customer)

async def get_customer_by_id(customer_id: str) -> Optional[Dict[str, Any]]:
    """
    Get a customer by ID
    """
    if not ObjectId.is_valid(customer_id):
        return None
    customer = await db.db.customers.find_one({"_id": ObjectId(customer_id)})
    return _with_id(customer)

async def get_customers(
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 50
) -> List[Dict[str, Any]]:
    """
    List customers, optionally filtered by a case-insensitive name or phone match
    """
    query: Dict[str, Any] = {}
    if search is not None and search.strip():
        pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
        query["$or"] = [{"name": pattern}, {"phone": pattern}]

    cursor = db.db.customers.find(query).sort("name", 1).skip(skip).limit(limit)
    customers = await cursor.to_list(length=limit)
    return [_with_id(customer) for customer in customers]

async def record_visit(customer_id: str, visit_date: str) -> None:
    """
    Move a customer's lastVisit forward to visit_date
    """
    if not ObjectId.is_valid(customer_id):
        return
    customer = await get_customer_by_id(customer_id)
    if not customer:
        return
    # ISO dates compare correctly as strings
    if customer.get("lastVisit") and customer["lastVisit"] >= visit_date:
        return
    await db.db.customers.update_one(
        {"_id": ObjectId(customer_id)},
        {"$set": {"lastVisit": visit_date}}
    )
