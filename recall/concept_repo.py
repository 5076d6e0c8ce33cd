"""
MongoDB repository for the concept registry.

Provides read-only access to extracted ideas: identity, title and
importance tier. The review core never writes concepts.
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.collection import Collection

from recall.fsrs.constants import ImportanceTier
from recall.schemas import ConceptRecord

# Load environment
load_dotenv()

# Configuration
DB_NAME = "booksmaxxing"
COLLECTION_NAME = "concepts"

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None
_collection: Optional[Collection] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get a connection to the MongoDB concepts collection.

    Uses a persistent connection pool that's reused across requests.
    """
    global _client, _collection

    if _collection is not None:
        return _collection

    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    _client = MongoClient(
        mongo_uri,
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    _collection = _client[DB_NAME][COLLECTION_NAME]

    return _collection


# ---- Query Functions ----

def _to_record(doc: Optional[dict]) -> Optional[ConceptRecord]:
    if doc is None:
        return None
    doc = {k: v for k, v in doc.items() if k != "_id"}
    try:
        return ConceptRecord(**doc)
    except ValidationError:
        # Unknown importance labels from older documents
        doc.pop("importance", None)
        return ConceptRecord(**doc)


def get_concept(concept_id: str) -> Optional[ConceptRecord]:
    """
    Get a concept by id.

    Returns:
        ConceptRecord, or None if the concept was deleted upstream
    """
    return _to_record(get_collection().find_one({"concept_id": concept_id}))


def get_importance_tier(concept_id: str) -> ImportanceTier:
    """
    Importance tier used to seed a concept's memory state.

    Missing concepts and unknown labels fall back to UNSET.
    """
    concept = get_concept(concept_id)
    if concept is None:
        return ImportanceTier.UNSET
    return ImportanceTier(concept.importance)


def get_concepts_for_book(book_id: str) -> list[ConceptRecord]:
    """
    Get all concepts extracted from one book, ordered by concept id.
    """
    docs = get_collection().find({"book_id": book_id}).sort("concept_id", 1)
    return [record for record in (_to_record(doc) for doc in docs) if record is not None]
