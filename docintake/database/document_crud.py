# docintake/database/document_crud.py
import re
from collections import Counter
from datetime import datetime
from typing import Optional

from bson import ObjectId
from pymongo import ReturnDocument

import docintake.database.mongo as mongo

STATUSES = ("processing", "completed", "error")


def _get_collection(name: str):
    if mongo.db is None:
        raise RuntimeError("Database not initialized. Ensure connect_to_mongo() is called.")
    return mongo.db[name]

def get_user_collection():
    return _get_collection("users")

def get_document_collection():
    return _get_collection("documents")

def get_page_collection():
    return _get_collection("pages")

def get_extraction_collection():
    return _get_collection("extractions")

def get_chat_collection():
    return _get_collection("chat_messages")


def _serialize(doc: Optional[dict]) -> Optional[dict]:
    if doc:
        doc["_id"] = str(doc["_id"])
    return doc


# ============== users ===============

async def get_user(user_id: str):
    collection = get_user_collection()
    return _serialize(await collection.find_one({"user_id": user_id}))

async def upsert_user(user: dict):
    collection = get_user_collection()
    now = datetime.utcnow()
    fields = {k: v for k, v in user.items() if v is not None}
    fields["updated_at"] = now
    result = await collection.find_one_and_update(
        {"user_id": user["user_id"]},
        {"$set": fields, "$setOnInsert": {"created_at": now}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    return _serialize(result)


# ============== documents ===============

async def create_document(doc: dict):
    collection = get_document_collection()
    doc["upload_date"] = datetime.utcnow()
    doc.setdefault("status", "processing")
    doc.setdefault("processing_progress", 0)
    result = await collection.insert_one(doc)
    doc["_id"] = str(result.inserted_id)
    return doc

async def get_documents(user_id: str):
    collection = get_document_collection()
    docs = await collection.find({"user_id": user_id}).sort("upload_date", -1).to_list(length=None)
    return [_serialize(doc) for doc in docs]

async def search_documents(user_id: str, query: str):
    collection = get_document_collection()
    cursor = collection.find({
        "user_id": user_id,
        "original_name": {"$regex": re.escape(query), "$options": "i"},
    })
    docs = await cursor.sort("upload_date", -1).to_list(length=None)
    return [_serialize(doc) for doc in docs]

async def get_documents_by_status(status: str):
    collection = get_document_collection()
    docs = await collection.find({"status": status}).to_list(length=None)
    return [_serialize(doc) for doc in docs]

async def get_document(doc_id: str):
    collection = get_document_collection()
    return _serialize(await collection.find_one({"_id": ObjectId(doc_id)}))

async def get_document_with_extractions(doc_id: str):
    doc = await get_document(doc_id)
    if not doc:
        return None
    doc["extractions"] = await get_extractions(doc_id)
    pages = await get_pages(doc_id)
    doc["extracted_text"] = "\n\n".join(page.get("extracted_text", "") for page in pages)
    return doc

async def update_document(doc_id: str, updates: dict):
    collection = get_document_collection()
    result = await collection.find_one_and_update(
        {"_id": ObjectId(doc_id)},
        {"$set": updates},
        return_document=ReturnDocument.AFTER,
    )
    return _serialize(result)

async def delete_document(doc_id: str):
    collection = get_document_collection()
    result = await collection.delete_one({"_id": ObjectId(doc_id)})
    await delete_pages(doc_id)
    await delete_extractions(doc_id)
    await get_chat_collection().delete_many({"document_id": doc_id})
    return result.deleted_count > 0


# ============== pages ===============

async def create_page(page: dict):
    collection = get_page_collection()
    page["created_at"] = datetime.utcnow()
    result = await collection.insert_one(page)
    page["_id"] = str(result.inserted_id)
    return page

async def get_pages(doc_id: str):
    collection = get_page_collection()
    pages = await collection.find({"document_id": doc_id}).sort("page_number", 1).to_list(length=None)
    return [_serialize(page) for page in pages]

async def delete_pages(doc_id: str):
    await get_page_collection().delete_many({"document_id": doc_id})


# ============== extractions ===============

async def create_extraction(extraction: dict):
    collection = get_extraction_collection()
    now = datetime.utcnow()
    extraction["created_at"] = now
    extraction["updated_at"] = now
    result = await collection.insert_one(extraction)
    extraction["_id"] = str(result.inserted_id)
    return extraction

async def get_extraction(doc_id: str, extraction_type: str):
    collection = get_extraction_collection()
    extraction = await collection.find_one({"document_id": doc_id, "extraction_type": extraction_type})
    return _serialize(extraction)

async def get_extractions(doc_id: str):
    collection = get_extraction_collection()
    extractions = await collection.find({"document_id": doc_id}).to_list(length=None)
    return [_serialize(extraction) for extraction in extractions]

async def update_extraction(extraction_id: str, data: dict):
    collection = get_extraction_collection()
    await collection.update_one(
        {"_id": ObjectId(extraction_id)},
        {"$set": {"data": data, "updated_at": datetime.utcnow()}}
    )

async def delete_extractions(doc_id: str):
    await get_extraction_collection().delete_many({"document_id": doc_id})


# ============== chat ===============

async def create_chat_message(message: dict):
    collection = get_chat_collection()
    message["created_at"] = datetime.utcnow()
    result = await collection.insert_one(message)
    message["_id"] = str(result.inserted_id)
    return message

async def get_chat_messages(doc_id: str):
    collection = get_chat_collection()
    messages = await collection.find({"document_id": doc_id}).sort("created_at", 1).to_list(length=None)
    return [_serialize(message) for message in messages]


# ============== aggregates ===============

async def get_dashboard_stats(user_id: str):
    docs = await get_documents(user_id)
    counts = Counter(doc.get("status") for doc in docs)
    return {
        "total_documents": len(docs),
        "processing_count": counts["processing"],
        "completed_count": counts["completed"],
        "error_count": counts["error"],
        "recent_documents": docs[:5],
    }

async def get_reports_data(user_id: str):
    docs = await get_documents(user_id)
    doc_ids = [doc["_id"] for doc in docs]

    extractions = await get_extraction_collection().find(
        {"document_id": {"$in": doc_ids}, "extraction_type": "analysis"}
    ).to_list(length=None)
    chat_count = await get_chat_collection().count_documents({"user_id": user_id})

    status_breakdown = Counter({status: 0 for status in STATUSES})
    status_breakdown.update(doc.get("status") for doc in docs)

    uploads_by_day = Counter(
        doc["upload_date"].date().isoformat() for doc in docs if doc.get("upload_date")
    )

    keyword_counts = Counter()
    entity_types = Counter()
    total_words = 0
    total_characters = 0
    for extraction in extractions:
        data = extraction.get("data") or {}
        keyword_counts.update(kw.lower() for kw in data.get("keywords", []))
        entity_types.update(entity.get("type") for entity in data.get("entities", []))
        total_words += data.get("word_count", 0)
        total_characters += data.get("character_count", 0)

    return {
        "total_documents": len(docs),
        "status_breakdown": dict(status_breakdown),
        "total_pages": sum(doc.get("page_count") or 0 for doc in docs),
        "total_words": total_words,
        "total_characters": total_characters,
        "average_words_per_document": round(total_words / len(extractions)) if extractions else 0,
        "total_chat_messages": chat_count,
        "top_keywords": [
            {"keyword": keyword, "count": count} for keyword, count in keyword_counts.most_common(10)
        ],
        "entity_types": dict(entity_types),
        "uploads_by_day": [
            {"date": day, "count": count} for day, count in sorted(uploads_by_day.items())
        ],
    }


async def ensure_indexes():
    collection = get_document_collection()
    await collection.create_index([("user_id", 1), ("upload_date", -1)])
    await collection.create_index("status")
    await get_page_collection().create_index([("document_id", 1), ("page_number", 1)])
    await get_extraction_collection().create_index([("document_id", 1), ("extraction_type", 1)])
    await get_chat_collection().create_index([("document_id", 1), ("created_at", 1)])
    await get_user_collection().create_index("user_id", unique=True)
