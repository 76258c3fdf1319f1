"""
FastAPI application and API endpoints.
Layered: API -> UserManager -> UserRepository -> MySQL. Connection pool opened in lifespan.
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Annotated, List

import pymysql
from fastapi import Depends, FastAPI, Path, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from users_backend.core.errors import ErrorWithStatus
from users_backend.core.health import check_live, check_ready
from users_backend.core.settings import get_settings
from users_backend.db import MySQLConnection
from users_backend.deps import get_user_manager
from users_backend.models import ErrorDetail, ErrorResponse, UserRequest, UserResponse
from users_backend.services.user_manager import UserManager
from users_backend.utils.request_logger import configure_logging, log_request

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: open MySQL pool (schema bootstrap included). Shutdown: close it."""
    configure_logging()
    connection = MySQLConnection(get_settings())
    try:
        connection.open()
    except pymysql.MySQLError as e:
        logger.warning("MySQL open failed: %s. Set DB_* in .env and ensure MySQL is running.", e)
    app.state.db = connection
    yield
    connection.close()


app = FastAPI(
    title="Users API",
    description="User management: CRUD with salted password hashing and admin flag",
    version="1.0.0",
    lifespan=lifespan,
)


def _error_response(request: Request, status_code: int, details: List[str]) -> JSONResponse:
    body = ErrorResponse(
        code=str(status_code),
        message=details[0] if details else "Error",
        details=[ErrorDetail(code=str(status_code), message=d) for d in details],
    )
    payload = body.model_dump()
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        payload["request_id"] = request_id
    response = JSONResponse(status_code=status_code, content=payload)
    if request_id:
        response.headers["X-Request-ID"] = request_id
    return response


def _normalize_detail(detail: object) -> list:
    """Convert FastAPI/HTTPException detail to list of strings for ErrorResponse."""
    if isinstance(detail, str):
        return [detail]
    if isinstance(detail, list):
        out = []
        for d in detail:
            if isinstance(d, str):
                out.append(d)
            elif isinstance(d, dict):
                loc = ".".join(str(p) for p in d.get("loc", ()) if p != "body")
                msg = d.get("msg", d.get("message", str(d)))
                out.append(f"{loc}: {msg}" if loc else msg)
            else:
                out.append(str(d))
        return out if out else ["Error"]
    return [str(detail)]


@app.exception_handler(ErrorWithStatus)
def error_with_status_handler(request: Request, exc: ErrorWithStatus) -> JSONResponse:
    return _error_response(request, exc.status, [exc.message])


@app.exception_handler(pymysql.err.IntegrityError)
def integrity_error_handler(request: Request, exc: pymysql.err.IntegrityError) -> JSONResponse:
    """Duplicate username or id rejected by the UNIQUE/PRIMARY KEY constraints: same 403 as a create conflict."""
    logger.warning("Write rejected by storage constraint: %s", exc)
    return _error_response(request, status.HTTP_403_FORBIDDEN, ["Username or id already in use"])


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Return structured ErrorResponse for 4xx/5xx. Includes request_id when available."""
    return _error_response(request, exc.status_code, _normalize_detail(exc.detail))


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(request, 422, _normalize_detail(exc.errors()))


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, ["Internal server error"])


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Set request_id on request.state and add X-Request-ID to response."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.middleware("http")
async def structured_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        latency_ms = (time.perf_counter() - start) * 1000
        log_request(request, status_code, latency_ms)


UserId = Annotated[int, Path(gt=0, description="User id")]
Manager = Annotated[UserManager, Depends(get_user_manager)]


# ----- Users -----

@app.get("/users", response_model=List[UserResponse])
async def find_users(manager: Manager):
    return await manager.find_users()


@app.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserRequest, manager: Manager):
    """Create a user. Re-posting identical credentials returns the existing user; anything else is 403."""
    return await manager.create_user(body)


@app.get("/users/{user_id}", response_model=UserResponse)
async def find_user_by_id(user_id: UserId, manager: Manager):
    return await manager.find_user_by_id(user_id)


@app.put("/users/{user_id}", response_model=UserResponse)
async def update_user_by_id(user_id: UserId, body: UserRequest, manager: Manager):
    """Replace the user with this id, or create it with this id if it does not exist."""
    updated = await manager.update_user_by_id(user_id, body)
    if updated is not None:
        return updated
    return await manager.create_user_with_id(user_id, body)


@app.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_by_id(user_id: UserId, manager: Manager):
    await manager.delete_user_by_id(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----- Health -----

@app.get("/health")
def health():
    """Simple health (backward compatible)."""
    return {"status": "ok"}


@app.get("/health/live")
def health_live():
    """Liveness: process is up."""
    return check_live()


@app.get("/health/ready")
async def health_ready(request: Request):
    """Readiness: DB reachable."""
    return await check_ready(getattr(request.app.state, "db", None))
