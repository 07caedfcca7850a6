from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from realty_demo.dependencies import get_runtime, require_sample_mode
from realty_demo.schemas.demo import DocumentCreate
from realty_demo.services.runtime import DemoRuntime

logger = logging.getLogger("realty_demo.routers.deal_desk")

router = APIRouter(prefix="/api/demo", tags=["deal-desk"])


@router.get("/documents")
async def list_documents(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    return {"documents": runtime.store.state.documents}


@router.post("/documents", status_code=status.HTTP_201_CREATED)
async def add_document(
    payload: DocumentCreate,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    document = runtime.store.add_document_placeholder(payload.title, payload.property)
    return {"document": document}


@router.post("/documents/{document_id}/ready")
async def mark_document_ready(
    document_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    return {"document": runtime.store.mark_document_ready(document_id)}


@router.delete("/documents/{document_id}")
async def remove_document(
    document_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.remove_document(document_id)
    return {"documents": runtime.store.state.documents}


@router.get("/deals")
async def list_deals(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    return {"deals": runtime.store.state.deals}


@router.delete("/deals/{deal_id}")
async def archive_deal(
    deal_id: str,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.archive_deal(deal_id)
    return {"deals": runtime.store.state.deals}
