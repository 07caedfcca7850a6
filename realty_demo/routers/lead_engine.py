from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from realty_demo.dependencies import get_runtime, require_sample_mode
from realty_demo.errors import ApiError
from realty_demo.schemas.demo import (
    AutomationToggle,
    FollowUpSchedule,
    FollowUpSnooze,
    LeadCreate,
    LeadUpdate,
)
from realty_demo.services.follow_up_timer import countdown
from realty_demo.services.message_templates import compose_quick_message
from realty_demo.services.runtime import DemoRuntime

logger = logging.getLogger("realty_demo.routers.lead_engine")

router = APIRouter(prefix="/api/demo", tags=["lead-engine"])


# ---------------------------------------------------------------------------
# Leads
# ---------------------------------------------------------------------------

@router.get("/leads")
async def list_leads(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    """Leads ordered newest first by created_at."""
    leads = sorted(runtime.store.state.leads, key=lambda lead: lead.created_at, reverse=True)
    return {"leads": leads}


@router.post("/leads", status_code=status.HTTP_201_CREATED)
async def create_lead(
    payload: LeadCreate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    if not payload.name.strip():
        raise ApiError("Name required: add at least a lead name to continue.", 422)
    lead = runtime.store.create_lead(payload)
    return {"lead": lead}


@router.post("/leads/sample", status_code=status.HTTP_201_CREATED)
async def add_sample_lead(runtime: DemoRuntime = Depends(require_sample_mode)) -> Dict[str, Any]:
    return {"lead": runtime.store.add_lead_from_library()}


@router.patch("/leads/{lead_id}")
async def update_lead(
    lead_id: str,
    payload: LeadUpdate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    updates = payload.model_dump(exclude_unset=True)
    if "name" in updates and updates["name"] is not None:
        updates["name"] = updates["name"].strip() or updates["name"]
    lead = runtime.store.update_lead(lead_id, updates)
    return {"lead": lead}


@router.delete("/leads/{lead_id}")
async def delete_lead(
    lead_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.delete_lead(lead_id)
    return {"leads": runtime.store.state.leads}


@router.post("/leads/{lead_id}/follow-up")
async def prepare_follow_up(
    lead_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    return {"draft": runtime.store.prepare_follow_up(lead_id)}


@router.delete("/follow-up-draft")
async def clear_follow_up_draft(runtime: DemoRuntime = Depends(require_sample_mode)) -> Dict[str, Any]:
    runtime.store.clear_follow_up_draft()
    return {"draft": None}


@router.post("/leads/{lead_id}/text")
async def send_quick_text(
    lead_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    """Instant text to the lead's linked conversation, if it has one."""
    lead = runtime.store.state.find_lead(lead_id)
    if lead is None:
        return {"message": None}

    body = compose_quick_message(lead)
    if lead.conversation_id:
        runtime.store.append_conversation_message(lead.conversation_id, body, "agent")
    runtime.store.add_notification("Text delivered", body)
    return {"message": body}


# ---------------------------------------------------------------------------
# Scheduled follow-ups
# ---------------------------------------------------------------------------

def _follow_up_rows(runtime: DemoRuntime) -> list:
    now = runtime.clock.now()
    rows = []
    for item in runtime.store.state.scheduled_follow_ups:
        badge = countdown(item, now)
        rows.append({**item.model_dump(mode="json"), "label": badge.label, "remaining": badge.remaining})
    return rows


@router.get("/follow-ups")
async def list_follow_ups(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    return {
        "follow_ups": _follow_up_rows(runtime),
        "automation_enabled": runtime.store.state.automation_enabled,
    }


@router.post("/follow-ups", status_code=status.HTTP_201_CREATED)
async def schedule_follow_up(
    payload: FollowUpSchedule,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    item = runtime.follow_ups.schedule(payload.lead_id, payload.delay)
    if item is None:
        raise ApiError(f"Lead {payload.lead_id} not found", status.HTTP_404_NOT_FOUND)
    return {"follow_up": item}


@router.post("/follow-ups/{follow_up_id}/send")
async def send_follow_up(
    follow_up_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    return {"follow_up": runtime.follow_ups.send(follow_up_id)}


@router.post("/follow-ups/{follow_up_id}/snooze")
async def snooze_follow_up(
    follow_up_id: str,
    payload: FollowUpSnooze,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    return {"follow_up": runtime.follow_ups.snooze(follow_up_id, payload.delay)}


@router.delete("/follow-ups/{follow_up_id}")
async def cancel_follow_up(
    follow_up_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.follow_ups.cancel(follow_up_id)
    return {"follow_ups": _follow_up_rows(runtime)}


@router.put("/automation")
async def toggle_automation(
    payload: AutomationToggle,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.set_automation_enabled(payload.enabled)
    logger.info("Follow-up automation %s", "enabled" if payload.enabled else "paused")
    return {"automation_enabled": runtime.store.state.automation_enabled}
