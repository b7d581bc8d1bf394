from __future__ import annotations

import threading
from dataclasses import asdict
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .config import Settings, load_settings
from .content import Content
from .meta import ProfileStore
from .progression import CATEGORIES
from .session import Session


app = FastAPI(title="Aether Zenith Backend")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # adjust for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# sync handlers run in a threadpool; one request touches the session at a time
_session_lock = threading.Lock()


class TickRequest(BaseModel):
    steps: int = Field(1, ge=1, le=3600)
    dt: float = Field(1 / 60, gt=0, le=0.1)
    held: List[str] = []


def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def _default_session() -> Session:
    settings = load_settings()
    return Session(settings, Content(), ProfileStore(settings.meta.save_path))


def get_session() -> Session:
    return _default_session()


def _upgrade_view(session: Session) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in CATEGORIES:
        t = session.upgrades[key]
        out[key] = {"level": t.level, "max_level": t.max_level, "next_cost": t.next_cost}
    return out


def _profile_view(session: Session) -> Dict[str, Any]:
    return {"credits": session.credits, "upgrades": session.upgrades.levels()}


def _session_view(session: Session, drain: bool = False) -> Dict[str, Any]:
    snap = session.snapshot()
    view: Dict[str, Any] = {
        "status": session.status.value,
        "snapshot": asdict(snap) if snap is not None else None,
    }
    if drain:
        view["notifications"] = [asdict(n) for n in session.drain_notifications()]
    return view


@app.get("/api/settings")
def read_settings(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    return asdict(settings)


@app.get("/api/profile")
def get_profile(session: Session = Depends(get_session)) -> Dict[str, Any]:
    with _session_lock:
        return _profile_view(session)


@app.post("/api/profile/reset")
def reset_profile(session: Session = Depends(get_session)) -> Dict[str, Any]:
    with _session_lock:
        session.reset_profile()
        return _profile_view(session)


@app.get("/api/upgrades")
def list_upgrades(session: Session = Depends(get_session)) -> Dict[str, Any]:
    with _session_lock:
        return _upgrade_view(session)


@app.post("/api/upgrades/{category}")
def buy_upgrade(category: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    if category not in CATEGORIES:
        raise HTTPException(404, f"Unknown upgrade category: {category}")
    with _session_lock:
        result = session.purchase_upgrade(category)
        return {
            "ok": result.ok,
            "reason": result.reason,
            "cost": result.cost,
            "credits": session.credits,
            "upgrades": _upgrade_view(session),
        }


_TRANSITIONS = {
    "start": Session.start_session,
    "pause": Session.pause_session,
    "resume": Session.resume_session,
    "restart": Session.restart_session,
    "end": Session.end_session,
    "upgrades": Session.open_upgrades,
}


@app.post("/api/session/tick")
def tick_session(req: TickRequest, session: Session = Depends(get_session)) -> Dict[str, Any]:
    with _session_lock:
        session.set_input(req.held)
        ran = 0
        for _ in range(req.steps):
            if not session.tick(req.dt):
                break
            ran += 1
        view = _session_view(session, drain=True)
    view["ticks"] = ran
    return view


@app.get("/api/session/snapshot")
def read_snapshot(session: Session = Depends(get_session)) -> Dict[str, Any]:
    with _session_lock:
        return _session_view(session)


@app.post("/api/session/notifications")
def drain_notifications(session: Session = Depends(get_session)) -> Dict[str, Any]:
    with _session_lock:
        return {"notifications": [asdict(n) for n in session.drain_notifications()]}


@app.post("/api/session/{action}")
def control_session(action: str, session: Session = Depends(get_session)) -> Dict[str, Any]:
    fn = _TRANSITIONS.get(action)
    if fn is None:
        raise HTTPException(404, f"Unknown session action: {action}")
    with _session_lock:
        if not fn(session):
            raise HTTPException(409, f"Cannot {action} from {session.status.value}")
        return _session_view(session)
