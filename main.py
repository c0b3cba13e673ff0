import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import get_settings
from database import close_client, ensure_indexes, get_db
from errors import error_body, register_exception_handlers
from routers import architecture, auth, resources, safety_reports, workspaces

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
)
logger = logging.getLogger("siteguard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting SiteGuard API ({settings.environment})")
    try:
        ensure_indexes(get_db(settings))
    except PyMongoError as exc:
        logger.error(f"Could not create indexes: {exc}")
    yield
    close_client()
    logger.info("SiteGuard API stopped")


# App and CORS
app = FastAPI(title="SiteGuard API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def body_size_guard_middleware(request: Request, call_next):
    limit = settings.max_body_bytes
    content_length = request.headers.get("content-length")
    if content_length is not None:
        if not content_length.isdigit():
            return JSONResponse(
                status_code=400,
                content=error_body(400, "BAD_REQUEST", "Invalid Content-Length header"),
            )
        size = int(content_length)
    elif request.method in ("POST", "PUT", "PATCH"):
        size = len(await request.body())
    else:
        size = 0
    if size > limit:
        logger.info(f"{request.method} {request.url.path} rejected: body of {size} bytes exceeds {limit}")
        return JSONResponse(
            status_code=413,
            content=error_body(413, "PAYLOAD_TOO_LARGE", f"Request body exceeds {limit} bytes"),
        )
    return await call_next(request)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "0"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    response.headers["Referrer-Policy"] = "no-referrer"
    response.headers["Cross-Origin-Opener-Policy"] = "same-origin"
    response.headers["Cross-Origin-Resource-Policy"] = "same-origin"
    response.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none'"
    return response


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    status_code = 500
    start = time.perf_counter()
    try:
        response = await call_next(request)
        status_code = response.status_code
    finally:
        duration = time.perf_counter() - start
        logger.info(
            f"{request.method} {request.url.path} -> {status_code} "
            f"({duration:.3f}s) [rid={request_id[:8]}]"
        )

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Response-Time"] = f"{duration:.4f}s"
    return response


register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(workspaces.router)
app.include_router(resources.router)
app.include_router(architecture.router)
app.include_router(safety_reports.router)


# Utility endpoints
@app.get("/")
def root():
    return {"message": "SiteGuard API running"}


@app.get("/health")
def health(db: Database = Depends(get_db)):
    try:
        db.command("ping")
        database = "ok"
    except PyMongoError as exc:
        logger.warning(f"Health check could not reach the database: {exc}")
        database = "unavailable"
    return {"status": "ok", "database": database}
