import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import PlayerStore, get_player_store
from errors import ErrorKind, RewardsError
from ledger import XP_PER_MILESTONE
from rewards import claim_rewards, get_leaderboard, get_reward_status, parse_limit
from schemas import (
    ClaimRequest,
    ClaimResponse,
    HealthResponse,
    LeaderboardResponse,
    RewardStatusResponse,
)

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "Mystical Monsters Rewards API"
PORT = int(os.getenv("PORT", 8000))

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOTHING_TO_CLAIM: 400,
    ErrorKind.INTERNAL: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s is running on port %s", SERVICE_NAME, PORT)
    logger.info("Reward system: %d XP per milestone", XP_PER_MILESTONE)
    logger.info("Health check: http://localhost:%s/api/health", PORT)
    yield


app = FastAPI(title=SERVICE_NAME, version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Error mapping ----------
@app.exception_handler(RewardsError)
async def rewards_error_handler(request: Request, exc: RewardsError):
    status_code = STATUS_BY_KIND[exc.kind]
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content=exc.to_dict())

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "message": str(exc)},
    )

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods both count as an unmatched route.
    if exc.status_code in (404, 405):
        return JSONResponse(
            status_code=404,
            content={"error": "Not found", "message": "The requested endpoint does not exist"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )

# ---------- Routes ----------
@app.get("/api/health", response_model=HealthResponse)
def health():
    return {
        "status": "ok",
        "message": f"{SERVICE_NAME} is running",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }

# Registered before /api/rewards/{uid} so "leaderboard" is not taken as a uid.
@app.get("/api/rewards/leaderboard", response_model=LeaderboardResponse)
def leaderboard(limit: Optional[str] = None, store: PlayerStore = Depends(get_player_store)):
    return get_leaderboard(store, parse_limit(limit))

@app.get("/api/rewards/{uid}", response_model=RewardStatusResponse)
def reward_status(uid: str, store: PlayerStore = Depends(get_player_store)):
    """Available rewards for a player based on their XP."""
    return get_reward_status(store, uid)

@app.post("/api/rewards/claim", response_model=ClaimResponse)
def claim(payload: Optional[ClaimRequest] = None, store: PlayerStore = Depends(get_player_store)):
    """Claim every pending milestone reward for the player in the body."""
    return claim_rewards(store, payload.uid if payload else None)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
