from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, status

from realty_demo.dependencies import get_runtime, require_sample_mode
from realty_demo.errors import ApiError
from realty_demo.schemas.demo import ActivePropertySelect, MarketingPost
from realty_demo.services.runtime import DemoRuntime

logger = logging.getLogger("realty_demo.routers.marketing")

router = APIRouter(prefix="/api/demo", tags=["marketing"])


@router.get("/posts")
async def list_posts(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    return {"posts": runtime.store.state.posts}


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def add_post(
    payload: MarketingPost,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.add_marketing_asset(payload)
    return {"posts": runtime.store.state.posts}


@router.delete("/posts")
async def remove_post(
    title: str = Query(..., min_length=1),
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    runtime.store.remove_marketing_asset(title)
    return {"posts": runtime.store.state.posts}


@router.get("/properties")
async def list_properties(runtime: DemoRuntime = Depends(get_runtime)) -> Dict[str, Any]:
    return {
        "properties": runtime.store.property_library,
        "active_property": runtime.store.state.active_property,
    }


@router.post("/properties/random")
async def randomize_property(runtime: DemoRuntime = Depends(require_sample_mode)) -> Dict[str, Any]:
    return {"active_property": runtime.store.randomize_property()}


@router.put("/properties/active")
async def set_active_property(
    payload: ActivePropertySelect,
    runtime: DemoRuntime = Depends(require_sample_mode),
) -> Dict[str, Any]:
    prop = runtime.store.set_active_property(payload.property_id)
    if prop is None:
        raise ApiError(f"Property {payload.property_id} not found", status.HTTP_404_NOT_FOUND)
    return {"active_property": prop}


@router.delete("/properties/active")
async def reset_active_property(runtime: DemoRuntime = Depends(require_sample_mode)) -> Dict[str, Any]:
    runtime.store.reset_active_property()
    return {"active_property": runtime.store.state.active_property}
