from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from prometheus_fastapi_instrumentator import Instrumentator
from contextlib import asynccontextmanager
import logging

from shiptrack.version import VERSION
from shiptrack.api import routes_admin, routes_auth, routes_tracking, routes_user
from shiptrack.core.config import settings
from shiptrack.core.errors import TrackingError
from shiptrack.core.limiting import limiter
from shiptrack.db.session import check_db_health, create_all

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Shipment Tracking Service")
    for route in app.routes:
        if hasattr(route, "methods") and hasattr(route, "path"):
            logger.info(f"{route.methods} {route.path}")

    if settings.AUTO_CREATE_TABLES:
        logger.info("Creating database tables")
        create_all()

    yield

    logger.info("Shutting down Shipment Tracking Service")

app = FastAPI(
    title="Shipment Tracking Service",
    version=VERSION,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

instrumentator = Instrumentator()
instrumentator.instrument(app).expose(
    app,
    include_in_schema=False,
    endpoint="/metrics",
    should_gzip=True,
)

# --- Uniform error envelope ---
@app.exception_handler(TrackingError)
async def tracking_error_handler(request: Request, exc: TrackingError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())

def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = next((str(p) for p in reversed(first.get("loc", ())) if isinstance(p, str) and p != "body"), None)
    if first.get("type") == "missing" and field:
        return f"{field} is required"
    msg = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    return f"{field}: {msg}" if field and first.get("type") != "value_error" else msg

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"success": False, "message": _validation_message(exc)})

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

# --- Health ---
@app.get("/health")
def health():
    """Health check including the database"""
    db_healthy = check_db_health()
    return {
        "status": "healthy" if db_healthy else "unhealthy",
        "services": {"database": db_healthy},
    }

@app.get("/v1/_info")
def info():
    return {"service": "tracking", "version": VERSION}

# --- Routers ---
app.include_router(routes_auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(routes_tracking.router, prefix="/api", tags=["tracking"])
app.include_router(routes_user.router, prefix="/api/user", tags=["user"])
app.include_router(routes_admin.router, prefix="/api/admin", tags=["admin"])
