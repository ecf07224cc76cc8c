"""Reward status, claim and leaderboard operations over a PlayerStore."""

import logging
import re
from typing import Any, Dict, Optional

from database import PlayerStore
from errors import InternalError, NotFound, NothingToClaim, ValidationError
from ledger import (
    milestones_reached,
    pending_rewards,
    preview_next,
    xp_needed_for_next_claim,
)
from schemas import Player

logger = logging.getLogger(__name__)

MAX_CLAIM_ATTEMPTS = 3
DEFAULT_LEADERBOARD_LIMIT = 10
LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def load_player(store: PlayerStore, uid: str) -> Player:
    doc = store.get_player(uid)
    if doc is None:
        raise NotFound(uid)
    return Player.from_document(doc)


def get_reward_status(store: PlayerStore, uid: str) -> Dict[str, Any]:
    player = load_player(store, uid)
    reached = milestones_reached(player.exp)
    claimed = player.claimedRewardMilestones
    pending = pending_rewards(player.exp, claimed)
    return {
        "success": True,
        "user": {
            "uid": player.uid,
            "username": player.username,
            "currentXp": player.exp,
            "currentCoins": player.coins,
            "currentTrophies": player.trophies,
        },
        "rewards": {
            "milestonesReached": reached,
            "claimedMilestones": claimed,
            "unclaimedMilestones": max(reached - claimed, 0),
            "pendingCoins": pending.coins,
            "pendingTrophies": pending.trophies,
            "rewardDetails": pending.details,
        },
        "nextReward": preview_next(player.exp, claimed),
    }


def claim_rewards(store: PlayerStore, uid: Optional[str]) -> Dict[str, Any]:
    """
    Pay out every unclaimed milestone for a player.

    The write only lands if the claimed counter and balances still hold what we
    read. When another claim got there first, the player is re-read and the
    claim re-validated, so a milestone is paid at most once.
    """
    if not uid:
        raise ValidationError("Missing required field: uid")

    for attempt in range(1, MAX_CLAIM_ATTEMPTS + 1):
        player = load_player(store, uid)
        claimed = player.claimedRewardMilestones
        reached = milestones_reached(player.exp)
        if reached <= claimed:
            raise NothingToClaim(xp_needed_for_next_claim(player.exp, claimed))

        pending = pending_rewards(player.exp, claimed)
        updated = store.apply_claim(uid, player, pending.coins, pending.trophies, reached)
        if updated is None:
            logger.warning(
                "Claim for %s lost a concurrent update (attempt %d/%d)",
                uid, attempt, MAX_CLAIM_ATTEMPTS,
            )
            continue

        after = Player.from_document(updated)
        logger.info(
            "Player %s claimed milestones %d-%d: +%d coins, +%d trophies",
            uid, claimed + 1, reached, pending.coins, pending.trophies,
        )
        return {
            "success": True,
            "message": "Rewards claimed successfully!",
            "claimed": {
                "milestones": reached - claimed,
                "totalCoins": pending.coins,
                "totalTrophies": pending.trophies,
                "details": pending.details,
            },
            "updated": {
                "coins": after.coins,
                "trophies": after.trophies,
                "claimedMilestones": after.claimedRewardMilestones,
            },
        }

    raise InternalError(f"Reward claim for {uid} kept conflicting with concurrent updates")


def parse_limit(raw: Optional[str]) -> int:
    """Leading integer of the query value ("3abc" -> 3, "2.5" -> 2)."""
    match = LEADING_INT.match(raw or "")
    limit = int(match.group(1)) if match else 0
    return limit if limit > 0 else DEFAULT_LEADERBOARD_LIMIT


def get_leaderboard(store: PlayerStore, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> Dict[str, Any]:
    entries = []
    for doc in store.top_players(limit):
        player = Player.from_document(doc)
        entries.append({
            "uid": player.uid,
            "username": player.username,
            "exp": player.exp,
            "trophies": player.trophies,
            "milestonesReached": milestones_reached(player.exp),
        })
    return {"success": True, "leaderboard": entries}
