"""
Errors raised by the reward operations.

Each error carries an ErrorKind; main.py maps the kind to an HTTP status and
renders to_dict() as the response body.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    NOTHING_TO_CLAIM = "nothing_to_claim"
    INTERNAL = "internal"


class RewardsError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    error: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.error)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.message is not None:
            body["message"] = self.message
        return body


class NotFound(RewardsError):
    kind = ErrorKind.NOT_FOUND
    error = "User not found"

    def __init__(self, uid: str):
        super().__init__()
        self.uid = uid

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "uid": self.uid}


class ValidationError(RewardsError):
    kind = ErrorKind.VALIDATION

    def __init__(self, error: str, message: Optional[str] = None):
        self.error = error
        super().__init__(message)


class NothingToClaim(RewardsError):
    kind = ErrorKind.NOTHING_TO_CLAIM
    error = "No rewards available to claim"

    def __init__(self, xp_needed: int):
        super().__init__(f"You need {xp_needed} more XP to earn the next reward")
        self.xp_needed = xp_needed


class InternalError(RewardsError):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
