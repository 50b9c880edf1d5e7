"""
Entry Store: Procedure-Call API Server
======================================

Thin HTTP adapter over EntryStore. The acting identity is taken from the
X-Identity header of every request; delegation names its target in the
body. Contract errors are returned with their own status code
(400 / 404 / 409) and a JSON error payload.

Endpoints:
- POST   /api/v1/entry              -> Create
- PUT    /api/v1/entry              -> Update
- DELETE /api/v1/entry              -> Delete
- POST   /api/v1/entry/delegate     -> Delegate
- PUT    /api/v1/entry/priority     -> AssignPriority
- PUT    /api/v1/entry/deadline     -> ConfigureDeadline
- GET    /api/v1/entry              -> FetchEntry
- GET    /api/v1/entry/completion   -> CheckCompletion
- GET    /api/v1/entry/diagnostics  -> Diagnostics
- GET    /api/v1/entry/priority     -> priority record
- GET    /api/v1/entry/deadline     -> temporal record

Usage:
    uvicorn entrystore.api.server:app --reload
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..contracts.base import Error, ErrorCode, Identity, Result
from ..contracts.events import AuditEventType
from ..engine import EntryStore, EntryStoreConfig
from .mapper import map_error, map_value

# =============================================================================
# INFRASTRUCTURE SETUP
# =============================================================================

# Global store instance
store_instance: Optional[EntryStore] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the store on startup unless one was injected."""
    global store_instance

    if store_instance is None:
        config = EntryStoreConfig.from_env()
        print(f"[*] Initializing entry store (max content {config.max_content_bytes} bytes)")
        store_instance = EntryStore(config)
        print("[*] Entry store initialized successfully.")

    yield

    print("[*] Shutting down entry store.")
    store_instance = None


app = FastAPI(
    title="Entry Store API",
    version="0.1.0",
    description="Per-identity record store",
    lifespan=lifespan
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and missing headers are INVALID_PARAMETER, not 422."""
    problems = [
        f"{'.'.join(str(part) for part in problem['loc'])}: {problem['msg']}"
        for problem in exc.errors()
    ]
    error = Error.create(ErrorCode.INVALID_PARAMETER, "; ".join(problems) or "invalid request")
    if problems:
        error = error.with_context("parameter", problems[0].split(":")[0])

    if store_instance is not None:
        store_instance.observability.record_operation(
            action="validate_request",
            identity=None,
            event_type=AuditEventType.SYSTEM,
            error_code=ErrorCode.INVALID_PARAMETER,
            layer="api"
        )
    return JSONResponse(status_code=error.code.status, content=map_error(error))


# =============================================================================
# REQUEST MODELS
# =============================================================================

class ContentBody(BaseModel):
    content: str


class UpdateBody(BaseModel):
    content: str
    completed: bool


class DelegateBody(BaseModel):
    target: str
    content: str


class PriorityBody(BaseModel):
    tier: int


class DeadlineBody(BaseModel):
    duration_blocks: int


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_store() -> EntryStore:
    if store_instance is None:
        raise HTTPException(status_code=503, detail="Entry store not initialized")
    return store_instance


def _reject_identity(store: EntryStore, action: str, message: str) -> JSONResponse:
    store.observability.record_operation(
        action=action,
        identity=None,
        event_type=AuditEventType.SYSTEM,
        error_code=ErrorCode.INVALID_PARAMETER,
        layer="api"
    )
    error = Error.create(ErrorCode.INVALID_PARAMETER, message)
    return JSONResponse(status_code=error.code.status, content=map_error(error))


def _respond(result: Result) -> JSONResponse:
    if result.is_failure:
        return JSONResponse(status_code=result.error.code.status, content=map_error(result.error))
    return JSONResponse(status_code=200, content={"result": map_value(result.value)})


def _call(store: EntryStore, x_identity: str, action: str, operation) -> JSONResponse:
    """Resolve the caller identity from the header and run `operation`."""
    try:
        caller = Identity(x_identity.strip())
    except ValueError:
        return _reject_identity(store, action, "X-Identity header must be non-empty")
    return _respond(operation(caller))


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/health")
async def health_check():
    """System status."""
    if not store_instance:
        raise HTTPException(status_code=503, detail="Entry store not initialized")
    return {"status": "online", "entries": store_instance.entry_count()}


@app.post("/api/v1/entry")
def create_entry(body: ContentBody, x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "create_entry", lambda caller: store.create_entry(caller, body.content))


@app.put("/api/v1/entry")
def update_entry(body: UpdateBody, x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(
        store, x_identity, "update_entry",
        lambda caller: store.update_entry(caller, body.content, body.completed)
    )


@app.delete("/api/v1/entry")
def delete_entry(x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "delete_entry", store.delete_entry)


@app.post("/api/v1/entry/delegate")
def delegate_entry(body: DelegateBody, x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    # The caller is resolved only to reject anonymous requests; the entry
    # belongs to the target.
    try:
        Identity(x_identity.strip())
        target = Identity(body.target.strip())
    except ValueError:
        return _reject_identity(store, "delegate_entry", "caller and target identities must be non-empty")
    return _respond(store.delegate_entry(target, body.content))


@app.put("/api/v1/entry/priority")
def assign_priority(body: PriorityBody, x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "assign_priority", lambda caller: store.assign_priority(caller, body.tier))


@app.put("/api/v1/entry/deadline")
def configure_deadline(body: DeadlineBody, x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(
        store, x_identity, "configure_deadline",
        lambda caller: store.configure_deadline(caller, body.duration_blocks)
    )


@app.get("/api/v1/entry")
def fetch_entry(x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "fetch_entry", store.fetch_entry)


@app.get("/api/v1/entry/completion")
def check_completion(x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "check_completion", store.check_completion)


@app.get("/api/v1/entry/diagnostics")
def diagnostics(x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "diagnostics", store.diagnostics)


@app.get("/api/v1/entry/priority")
def fetch_priority(x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "fetch_priority", store.fetch_priority)


@app.get("/api/v1/entry/deadline")
def fetch_deadline(x_identity: str = Header(...), store: EntryStore = Depends(get_store)):
    return _call(store, x_identity, "fetch_deadline", store.fetch_deadline)


@app.get("/api/v1/report")
def operation_report(store: EntryStore = Depends(get_store)):
    """Summary of the operation log."""
    return store.observability.generate_report()
