"""
Reward ledger for XP milestones.

Every XP_PER_MILESTONE points of experience is one milestone. A player's
record only stores how many milestones were already paid out, so everything
here is derived from (xp, claimed) and has no side effects.
"""

from types import MappingProxyType
from typing import Dict, List, Mapping, NamedTuple

XP_PER_MILESTONE = 1000


class Reward(NamedTuple):
    coins: int
    trophies: int


REWARD_TABLE: Mapping[int, Reward] = MappingProxyType({
    1: Reward(coins=100, trophies=10),
    2: Reward(coins=200, trophies=20),
    3: Reward(coins=300, trophies=30),
    4: Reward(coins=500, trophies=50),
    5: Reward(coins=750, trophies=75),
})


class PendingRewards(NamedTuple):
    coins: int
    trophies: int
    details: List[Dict[str, int]]


def milestones_reached(xp: int) -> int:
    return int(xp // XP_PER_MILESTONE)


def reward_for_milestone(milestone: int) -> Reward:
    """Table value when one exists, otherwise scales linearly with the milestone."""
    reward = REWARD_TABLE.get(milestone)
    if reward is not None:
        return reward
    return Reward(coins=milestone * 100, trophies=milestone * 10)


def reward_detail(milestone: int) -> Dict[str, int]:
    reward = reward_for_milestone(milestone)
    return {
        "milestone": milestone,
        "xpRequired": milestone * XP_PER_MILESTONE,
        "coins": reward.coins,
        "trophies": reward.trophies,
    }


def pending_rewards(xp: int, claimed: int) -> PendingRewards:
    """Sum rewards for milestones in (claimed, milestones_reached(xp)], ascending."""
    details = [reward_detail(i) for i in range(claimed + 1, milestones_reached(xp) + 1)]
    return PendingRewards(
        coins=sum(d["coins"] for d in details),
        trophies=sum(d["trophies"] for d in details),
        details=details,
    )


def preview_next(xp: int, claimed: int) -> Dict[str, object]:
    # Next milestone is always ahead of xp, so xpNeeded is positive.
    milestone = milestones_reached(xp) + 1
    xp_required = milestone * XP_PER_MILESTONE
    return {
        "milestone": milestone,
        "xpRequired": xp_required,
        "xpNeeded": xp_required - xp,
        "reward": reward_for_milestone(milestone)._asdict(),
    }


def xp_needed_for_next_claim(xp: int, claimed: int) -> int:
    return (claimed + 1) * XP_PER_MILESTONE - xp
