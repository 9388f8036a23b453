"""
Database operations - Generic CRUD functions for all collections

These are the only calls the application makes against the store: filtered
listing with ordering and limit, single lookups, create, partial update and
delete. There are no transactions, multi-step flows issue one call per record.
"""
from typing import List, Dict, Optional, Tuple
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from praisewall.config.database import db_config
from datetime import datetime

SortSpec = List[Tuple[str, int]]

def to_object_id(doc_id: str) -> Optional[ObjectId]:
    """Parse a string id, None when it is not a valid ObjectId"""
    if isinstance(doc_id, ObjectId):
        return doc_id
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None

class DBOperations:
    """Generic database operations for MongoDB collections"""

    @staticmethod
    async def get_all(
        collection_name: str,
        filter_query: Dict = None,
        skip: int = 0,
        limit: int = 0,
        sort: Optional[SortSpec] = None,
    ) -> List[Dict]:
        """List documents matching filter_query, ordered by sort; limit 0 means no limit"""
        collection = db_config.get_collection(collection_name)
        filter_query = filter_query or {}
        cursor = collection.find(filter_query, sort=sort or None, skip=skip, limit=limit)
        return await cursor.to_list(length=limit or None)

    @staticmethod
    async def get_by_id(collection_name: str, doc_id: str) -> Optional[Dict]:
        """Get a single document by ID"""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        collection = db_config.get_collection(collection_name)
        return await collection.find_one({"_id": oid})

    @staticmethod
    async def get_one(collection_name: str, filter_query: Dict) -> Optional[Dict]:
        """Get a single document by filter query"""
        collection = db_config.get_collection(collection_name)
        return await collection.find_one(filter_query)

    @staticmethod
    async def create(collection_name: str, document: Dict) -> Dict:
        """Create a new document; created_at and updated_at share one timestamp"""
        collection = db_config.get_collection(collection_name)
        now = datetime.utcnow()
        document.setdefault("created_at", now)
        document.setdefault("updated_at", document["created_at"])
        result = await collection.insert_one(document)
        document["_id"] = result.inserted_id
        return document

    @staticmethod
    async def update(collection_name: str, doc_id: str, update_data: Dict) -> Optional[Dict]:
        """Apply a partial update by ID and return the updated document"""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        collection = db_config.get_collection(collection_name)
        update_data["updated_at"] = datetime.utcnow()
        return await collection.find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=ReturnDocument.AFTER,
        )

    @staticmethod
    async def delete(collection_name: str, doc_id: str) -> bool:
        """Delete a document by ID"""
        oid = to_object_id(doc_id)
        if oid is None:
            return False
        collection = db_config.get_collection(collection_name)
        result = await collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    @staticmethod
    async def count(collection_name: str, filter_query: Dict = None) -> int:
        """Count documents in a collection"""
        collection = db_config.get_collection(collection_name)
        return await collection.count_documents(filter_query or {})

db_ops = DBOperations()
