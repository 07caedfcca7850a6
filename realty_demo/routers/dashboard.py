from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from realty_demo.dependencies import get_runtime, require_sample_mode
from realty_demo.schemas.demo import ChatCreate, InsightUpdate, NotificationCreate
from realty_demo.services.runtime import DemoRuntime

logger = logging.getLogger("realty_demo.routers.dashboard")

router = APIRouter(prefix="/api/demo", tags=["dashboard"])


@router.get("/state")
async def read_state(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    """
    Full sample-mode snapshot, plus which conversations have a simulated
    client typing right now.
    """
    state = runtime.store.state
    typing = [c.id for c in state.conversations if runtime.simulator.is_typing(c.id)]
    return {"state": state, "typing": typing}


@router.post("/load")
async def load_sample_data(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    runtime.store.load_sample_data()
    return {"state": runtime.store.state}


@router.post("/reset")
async def reset_demo_data(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    """Reseed everything, discarding edits made during the demo."""
    runtime.simulator.cancel_pending()
    runtime.follow_ups.cancel_pending_clears()
    runtime.store.reset_demo_data()
    return {"state": runtime.store.state}


@router.post("/clear")
async def clear_sample_data(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    runtime.simulator.cancel_pending()
    runtime.follow_ups.cancel_pending_clears()
    runtime.store.clear_sample_data()
    return {"state": runtime.store.state}


@router.put("/insight")
async def update_insight(
    payload: InsightUpdate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.set_insight(payload.insight)
    return {"insight": runtime.store.state.insight}


@router.get("/notifications")
async def list_notifications(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    return {"notifications": runtime.store.state.notifications}


@router.post("/notifications", status_code=status.HTTP_201_CREATED)
async def add_notification(
    payload: NotificationCreate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    item = runtime.store.add_notification(payload.title, payload.detail, payload.timestamp)
    return {"notification": item}


@router.post("/chat", status_code=status.HTTP_201_CREATED)
async def append_chat(
    payload: ChatCreate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.append_assistant_chat(payload.role, payload.content)
    return {"chat": runtime.store.state.chat}
