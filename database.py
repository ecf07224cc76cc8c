"""
MongoDB access for player documents.

Connection settings come from the environment (or a local .env file):
DATABASE_URL and DATABASE_NAME select the database, PLAYERS_COLLECTION the
collection holding one document per player keyed by uid.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Protocol

from dotenv import load_dotenv
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection

from errors import InternalError
from schemas import Player

load_dotenv()

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")
PLAYERS_COLLECTION = os.getenv("PLAYERS_COLLECTION", "users")

db = None
if DATABASE_URL and DATABASE_NAME:
    # MongoClient connects lazily; a bad URL surfaces on the first query.
    client = MongoClient(DATABASE_URL)
    db = client[DATABASE_NAME]
else:
    logger.warning("DATABASE_URL or DATABASE_NAME not set, database unavailable")


class PlayerStore(Protocol):
    def get_player(self, uid: str) -> Optional[Dict[str, Any]]:
        ...

    def apply_claim(
        self,
        uid: str,
        before: Player,
        coins: int,
        trophies: int,
        claimed: int,
    ) -> Optional[Dict[str, Any]]:
        ...

    def top_players(self, limit: int) -> List[Dict[str, Any]]:
        ...


def claimed_filter(expected: int) -> Any:
    """Match a stored counter; a missing or null field reads as 0."""
    if expected == 0:
        return {"$in": [0, None]}
    return expected


class MongoPlayerStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def get_player(self, uid: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": uid})

    def apply_claim(self, uid, before, coins, trophies, claimed):
        """
        Credit a claim in one conditional write.

        Balances are written as absolute values computed from `before`, so the
        write only lands while the claimed counter and both balances still hold
        what was read. Returns the updated document, or None when any of them
        changed in between (a concurrent claim or balance update got there first).
        """
        return self.collection.find_one_and_update(
            {
                "_id": uid,
                "claimedRewardMilestones": claimed_filter(before.claimedRewardMilestones),
                "coins": claimed_filter(before.coins),
                "trophies": claimed_filter(before.trophies),
            },
            {
                "$set": {
                    "coins": before.coins + coins,
                    "trophies": before.trophies + trophies,
                    "claimedRewardMilestones": claimed,
                },
                "$currentDate": {"lastRewardClaimDate": True},
            },
            return_document=ReturnDocument.AFTER,
        )

    def top_players(self, limit: int) -> List[Dict[str, Any]]:
        return list(self.collection.find({}).sort("exp", DESCENDING).limit(limit))


def get_player_store() -> PlayerStore:
    if db is None:
        raise InternalError("Database not configured")
    return MongoPlayerStore(db[PLAYERS_COLLECTION])
