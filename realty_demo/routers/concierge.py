from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from realty_demo.dependencies import get_runtime, require_sample_mode
from realty_demo.schemas.demo import ClientMessageCreate, MessageCreate
from realty_demo.services.runtime import DemoRuntime

logger = logging.getLogger("realty_demo.routers.concierge")

router = APIRouter(prefix="/api/demo/conversations", tags=["concierge"])


@router.get("")
async def list_conversations(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    state = runtime.store.state
    return {
        "conversations": state.conversations,
        "active_conversation_id": state.active_conversation_id,
    }


@router.post("/{conversation_id}/open")
async def open_conversation(
    conversation_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.open_conversation(conversation_id)
    return {"conversation": runtime.store.state.find_conversation(conversation_id)}


@router.post("/{conversation_id}/messages", status_code=status.HTTP_201_CREATED)
async def send_message(
    conversation_id: str,
    payload: MessageCreate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    """
    Agent or assistant message. Agent messages get a simulated client reply
    unless simulate_reply is false.
    """
    if payload.sender == "agent":
        message = runtime.simulator.send_agent_message(
            conversation_id,
            payload.body,
            simulate_reply=payload.simulate_reply,
        )
    else:
        message = runtime.store.append_conversation_message(
            conversation_id, payload.body, payload.sender
        )
    return {
        "message": message,
        "typing": runtime.simulator.is_typing(conversation_id),
    }


@router.post("/{conversation_id}/client-messages", status_code=status.HTTP_201_CREATED)
async def inject_client_message(
    conversation_id: str,
    payload: ClientMessageCreate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    message = runtime.store.inject_client_conversation_message(conversation_id, payload.body)
    return {"message": message}
