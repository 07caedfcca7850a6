from __future__ import annotations

from fastapi import Depends, Request, status

from realty_demo.errors import ApiError
from realty_demo.services.runtime import DemoRuntime


def get_runtime(request: Request) -> DemoRuntime:
    runtime = getattr(request.app.state, "demo_runtime", None)
    if runtime is None:
        raise ApiError("Demo runtime is not initialized", status.HTTP_503_SERVICE_UNAVAILABLE)
    return runtime


def require_sample_mode(runtime: DemoRuntime = Depends(get_runtime)) -> DemoRuntime:
    """Mutations are only allowed while sample mode is on."""
    if not runtime.store.state.is_sample_mode:
        raise ApiError("Sample mode is disabled", status.HTTP_409_CONFLICT)
    return runtime
