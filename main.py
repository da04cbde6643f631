"""
Main entry point of the FastAPI service.
Initialises logging, the application and its routes.
"""

import uuid

from fastapi import FastAPI, Request

from config import ServiceConfig
from core.structured_logging import set_trace_id, set_user_id, setup_logging, trace_id_from_traceparent
from api.routes import router
from api.analytics_routes import router as analytics_router

setup_logging(service=ServiceConfig.APP_NAME)


# ============================================================================
# FASTAPI APP
# ============================================================================
app = FastAPI(
    title="HyperApp Community Analytics",
    description="Time patterns, hotspots, vibe correlations and safety scores for community reports",
    version=ServiceConfig.APP_VERSION,
)


# ============================================================================
# MIDDLEWARE
# ============================================================================
@app.middleware("http")
async def trace_context(request: Request, call_next):
    """Bind a trace id to the request's logging context and echo it back."""
    trace_id = (
        trace_id_from_traceparent(request.headers.get("traceparent"))
        or request.headers.get("x-trace-id")
        or uuid.uuid4().hex
    )
    set_trace_id(trace_id)
    set_user_id(None)

    response = await call_next(request)

    response.headers["x-trace-id"] = trace_id
    if "traceparent" in request.headers:
        response.headers["traceparent"] = request.headers["traceparent"]
    return response


# Register routes
app.include_router(router)
app.include_router(analytics_router)


# ============================================================================
# MAIN (local development)
# ============================================================================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=ServiceConfig.HOST,
        port=ServiceConfig.PORT,
        reload=True
    )
