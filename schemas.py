"""
Schemas for the Mystical Monsters Rewards API

Player maps to a MongoDB document in the players collection (one document
per player, keyed by uid). The remaining models describe request and
response bodies.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime

class Player(BaseModel):
    """
    Collection: "users"
    A player's XP and reward balances. Missing numeric fields read as 0.
    """
    uid: str = Field(..., description="Document _id")
    username: Optional[str] = None
    exp: int = Field(0, ge=0, description="Total XP, written by gameplay")
    coins: int = Field(0, ge=0, description="Reward currency balance")
    trophies: int = Field(0, ge=0, description="Trophy point balance")
    claimedRewardMilestones: int = Field(0, ge=0, description="Milestones already paid out")
    lastRewardClaimDate: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Player":
        return cls(
            uid=str(doc["_id"]),
            username=doc.get("username"),
            exp=int(doc.get("exp") or 0),
            coins=int(doc.get("coins") or 0),
            trophies=int(doc.get("trophies") or 0),
            claimedRewardMilestones=int(doc.get("claimedRewardMilestones") or 0),
            lastRewardClaimDate=doc.get("lastRewardClaimDate"),
        )

class Reward(BaseModel):
    coins: int = Field(..., ge=0)
    trophies: int = Field(..., ge=0)

class RewardDetail(Reward):
    milestone: int = Field(..., ge=1)
    xpRequired: int

# ---------- Responses ----------
class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str

class UserSummary(BaseModel):
    uid: str
    username: Optional[str] = None
    currentXp: int
    currentCoins: int
    currentTrophies: int

class RewardsSummary(BaseModel):
    milestonesReached: int
    claimedMilestones: int
    unclaimedMilestones: int
    pendingCoins: int
    pendingTrophies: int
    rewardDetails: List[RewardDetail]

class NextReward(BaseModel):
    milestone: int
    xpRequired: int
    xpNeeded: int
    reward: Reward

class RewardStatusResponse(BaseModel):
    success: bool = True
    user: UserSummary
    rewards: RewardsSummary
    nextReward: NextReward

class ClaimRequest(BaseModel):
    # Optional so a missing uid is reported as a 400, not a schema error.
    uid: Optional[str] = None

class ClaimedSummary(BaseModel):
    milestones: int
    totalCoins: int
    totalTrophies: int
    details: List[RewardDetail]

class UpdatedBalances(BaseModel):
    coins: int
    trophies: int
    claimedMilestones: int

class ClaimResponse(BaseModel):
    success: bool = True
    message: str
    claimed: ClaimedSummary
    updated: UpdatedBalances

class LeaderboardEntry(BaseModel):
    uid: str
    username: Optional[str] = None
    exp: int
    trophies: int
    milestonesReached: int

class LeaderboardResponse(BaseModel):
    success: bool = True
    leaderboard: List[LeaderboardEntry]
