"""
Shared fixtures: an in-memory PlayerStore and a TestClient wired to it.
"""

import copy
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from database import get_player_store
from main import app


class InMemoryPlayerStore:
    """PlayerStore over a dict of documents keyed by uid."""

    def __init__(self, players=None):
        self.docs = {}
        self.writes = 0
        for uid, fields in (players or {}).items():
            self.add(uid, **fields)

    def add(self, uid, **fields):
        self.docs[uid] = {"_id": uid, **fields}

    def get_player(self, uid):
        doc = self.docs.get(uid)
        return copy.deepcopy(doc) if doc is not None else None

    def apply_claim(self, uid, before, coins, trophies, claimed):
        doc = self.docs.get(uid)
        if doc is None:
            return None
        stored = tuple(doc.get(f) or 0 for f in ("claimedRewardMilestones", "coins", "trophies"))
        if stored != (before.claimedRewardMilestones, before.coins, before.trophies):
            return None
        doc["coins"] = before.coins + coins
        doc["trophies"] = before.trophies + trophies
        doc["claimedRewardMilestones"] = claimed
        doc["lastRewardClaimDate"] = datetime.now(timezone.utc)
        self.writes += 1
        return copy.deepcopy(doc)

    def top_players(self, limit):
        ranked = sorted(self.docs.values(), key=lambda d: d.get("exp") or 0, reverse=True)
        return [copy.deepcopy(d) for d in ranked[:limit]]


@pytest.fixture
def store():
    return InMemoryPlayerStore({
        "rookie": {"username": "Rookie", "exp": 999},
        "ash": {"username": "Ash", "exp": 5000, "coins": 50, "trophies": 5, "claimedRewardMilestones": 2},
        "misty": {"username": "Misty", "exp": 2500},
        "brock": {"username": "Brock", "exp": 7200, "coins": 10, "trophies": 1, "claimedRewardMilestones": 7},
    })


@pytest.fixture
def client(store):
    app.dependency_overrides[get_player_store] = lambda: store
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()
