"""
FastAPI backend for the wormhole rolling tracker.
Provides REST API endpoints for one in-memory tracker or game session.
"""

import random
from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend.config import (
    DEFAULT_WORMHOLE_CAPACITY,
    DEFAULT_INITIAL_STATE,
    DEFAULT_RESTRICTION,
    DEFAULT_SHIP_ID,
    DEFAULT_SHIP_MODE,
)
from backend.engine import WORMHOLE_MASS_TYPES, WORMHOLE_STATES, SHIP_MODES
from backend.engine.actions import Action, ship_transit, custom_transit
from backend.engine.definitions import (
    load_static_definitions,
    get_wormhole_info,
    get_all_wormhole_codes,
)
from backend.engine.game import GameSession
from backend.engine.queries import (
    validate_custom_mass,
    validate_transit,
    get_available_commands,
    get_eligible_ships,
)
from backend.engine.session import Session, configure
from backend.engine.tracker import TrackerSession

app = FastAPI(
    title="Wormhole Rolling API",
    description="Backend API for tracking and simulating wormhole rolling",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers so the frontend can read the error."""
    import traceback
    traceback.print_exc()
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# Reference data, loaded once and never mutated
ship_defs, wormhole_defs, special_wormhole_defs, restriction_levels = load_static_definitions()

# The one live session. Only the presentation layer holds it.
SESSION_ID = "local"
sessions: dict[str, Session] = {}


# ===== Pydantic Models =====

class ConfigureRequest(BaseModel):
    mode: str = "tracker"  # "tracker" or "game"
    capacity: int = DEFAULT_WORMHOLE_CAPACITY
    initial_state: str = DEFAULT_INITIAL_STATE
    restriction: int = DEFAULT_RESTRICTION
    """Wormhole code from GET /definitions. When set, capacity and restriction come from the catalogue."""
    wormhole_code: str | None = None
    initial_far_side: dict[str, int] = Field(default_factory=dict)  # ship_id -> count
    """Seed for reproducible games; omitted = nondeterministic."""
    seed: int | None = None


class TransitRequest(BaseModel):
    direction: str  # "outbound" or "inbound"
    ship_id: str | None = DEFAULT_SHIP_ID
    mode: str = DEFAULT_SHIP_MODE  # cold, hot, unknown or custom
    custom_mass: float | str | None = None


class CommitRequest(BaseModel):
    state: str  # no-change, stable, destab, critical, gone


# ===== Helpers =====

def get_session() -> Session:
    session = sessions.get(SESSION_ID)
    if session is None:
        raise HTTPException(status_code=404, detail="No active session. Configure one first.")
    return session


def session_response(session: Session, events=None, **extra) -> dict:
    out = {
        "session": session.snapshot(ship_defs),
        "available_commands": get_available_commands(session),
        "events": [e.to_dict() for e in (events or [])],
    }
    out.update(extra)
    return out


def build_action(session: Session, request: TransitRequest) -> Action:
    """Validate at the boundary, then build the engine action."""
    validation = validate_transit(session, request.ship_id, request.mode, request.direction, ship_defs)
    if not validation.valid:
        raise HTTPException(status_code=400, detail=validation.error)
    if request.mode == "custom":
        mass = validate_custom_mass(request.custom_mass)
        if not mass.valid:
            raise HTTPException(status_code=400, detail=mass.error)
        return custom_transit(mass.value, request.direction)
    return ship_transit(validation.value, request.direction, request.mode)


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Wormhole Rolling API", "version": "1.0.0"}


@app.get("/definitions")
def get_definitions():
    """All static reference data."""
    return {
        "ships": {k: asdict(v) for k, v in ship_defs.items()},
        "wormholes": {k: asdict(v) for k, v in wormhole_defs.items()},
        "special_wormholes": {k: asdict(v) for k, v in special_wormhole_defs.items()},
        "wormhole_codes": get_all_wormhole_codes(wormhole_defs, special_wormhole_defs),
        "restriction_levels": restriction_levels,
        "mass_types": WORMHOLE_MASS_TYPES,
        "states": WORMHOLE_STATES,
        "ship_modes": SHIP_MODES,
    }


@app.get("/wormholes/{code}")
def get_wormhole(code: str):
    info = get_wormhole_info(code, wormhole_defs, special_wormhole_defs, restriction_levels)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Unknown wormhole: {code}")
    return info


@app.post("/session/configure")
def configure_session(request: ConfigureRequest):
    """Start tracking (or a game). Replaces any existing session."""
    capacity = request.capacity
    restriction = request.restriction
    if request.wormhole_code:
        if request.wormhole_code in special_wormhole_defs:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"{request.wormhole_code} is a special wormhole with no fixed mass; "
                    "configure its capacity and restriction directly"
                ),
            )
        wh = wormhole_defs.get(request.wormhole_code)
        if wh is None:
            raise HTTPException(status_code=400, detail=f"Unknown wormhole: {request.wormhole_code}")
        capacity, restriction = wh.total_mass, wh.restriction
    rng = random.Random(request.seed) if request.seed is not None else None
    try:
        session, events = configure(
            request.mode,
            capacity,
            request.initial_state,
            restriction,
            ship_defs,
            initial_far_side=request.initial_far_side,
            rng=rng,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    sessions[SESSION_ID] = session
    return session_response(session, events)


@app.get("/session")
def get_session_state():
    return session_response(get_session())


@app.post("/session/reset")
def reset_session():
    """Discard the session. Nothing is kept."""
    sessions.pop(SESSION_ID, None)
    return {"session": None, "available_commands": get_available_commands(None)}


@app.get("/session/eligible-ships")
def get_session_eligible_ships():
    session = get_session()
    return {"ships": [asdict(s) for s in get_eligible_ships(ship_defs, session.restriction)]}


@app.post("/session/stage")
def stage_action(request: TransitRequest):
    """Tracker: queue a transit for the next commit."""
    session = get_session()
    if not isinstance(session, TrackerSession):
        raise HTTPException(status_code=400, detail="Staging is only available in tracker mode")
    action = build_action(session, request)
    try:
        events = session.stage(action)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_response(session, events)


@app.delete("/session/stage/{index}")
def unstage_action(index: int):
    session = get_session()
    if not isinstance(session, TrackerSession):
        raise HTTPException(status_code=400, detail="Staging is only available in tracker mode")
    try:
        events = session.unstage(index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_response(session, events)


@app.post("/session/commit")
def commit_staged(request: CommitRequest):
    """Tracker: apply staged transits with the observed state."""
    session = get_session()
    if not isinstance(session, TrackerSession):
        raise HTTPException(status_code=400, detail="Commit is only available in tracker mode")
    try:
        result, events = session.commit(request.state)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_response(session, events, result=result.to_dict())


@app.post("/session/action")
def apply_game_action(request: TransitRequest):
    """Game: resolve one transit immediately."""
    session = get_session()
    if not isinstance(session, GameSession):
        raise HTTPException(status_code=400, detail="Live actions are only available in game mode")
    action = build_action(session, request)
    try:
        entry, events = session.apply(action)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return session_response(session, events, entry=entry.to_dict())


if __name__ == "__main__":
    import logging
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=8000)
