from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.auth import crud
from taskboard.auth.deps import Gate, bearer_token, get_gate, get_sessions, get_store
from taskboard.auth.sessions import SessionRegistry
from taskboard.config import Config, load_config
from taskboard.errors import InvalidToken, MissingToken, NotFound, ServiceError, StoreError
from taskboard.store import ROLE_ADMIN, Store
from taskboard.todos import create_todo, delete_todo, list_todos, toggle_todo


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


router = APIRouter()


# -----------------------------
# Request bodies
# -----------------------------


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


# Authenticated bodies: validated after the token check.


class CreateTodoRequest(BaseModel):
    label: Any = None


class ToggleTodoRequest(BaseModel):
    done: Any = None  # bool sets the flag; anything else flips it


class AdminCreateUserRequest(BaseModel):
    name: Any = None
    email: Any = None
    password: Any = None
    role: Any = None  # user|admin, default user


# -----------------------------
# Health
# -----------------------------


@router.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


# -----------------------------
# Auth
# -----------------------------


@router.post("/api/auth/register", status_code=201)
def auth_register(
    payload: RegisterRequest,
    store: Store = Depends(get_store),
    sessions: SessionRegistry = Depends(get_sessions),
) -> Dict[str, Any]:
    token, profile = crud.register(
        store,
        sessions,
        name=payload.name,
        email=payload.email,
        password=payload.password,
    )
    return {"token": token, "profile": profile}


@router.post("/api/auth/login")
def auth_login(
    payload: LoginRequest,
    store: Store = Depends(get_store),
    sessions: SessionRegistry = Depends(get_sessions),
) -> Dict[str, Any]:
    token, profile = crud.login(store, sessions, email=payload.email, password=payload.password)
    return {"token": token, "profile": profile}


@router.get("/api/auth/session")
def auth_session(
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
) -> Dict[str, Any]:
    with gate.authenticate(token) as auth:
        return {"profile": crud.public_profile(auth.account)}


# -----------------------------
# Todos
# -----------------------------


@router.get("/api/todos")
def todos_list(
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
) -> Dict[str, Any]:
    with gate.authenticate(token) as auth:
        return {"todos": list_todos(auth.account)}


@router.post("/api/todos", status_code=201)
def todos_create(
    payload: Optional[CreateTodoRequest] = None,
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
) -> Dict[str, Any]:
    with gate.authenticate(token) as auth:
        todo = create_todo(auth.account, payload.label if payload else None)
        auth.writer()
    return {"todo": todo}


@router.patch("/api/todos/{todo_id}")
def todos_toggle(
    todo_id: str,
    payload: Optional[ToggleTodoRequest] = None,
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
) -> Dict[str, Any]:
    done = payload.done if payload is not None and isinstance(payload.done, bool) else None
    with gate.authenticate(token) as auth:
        todo = toggle_todo(auth.account, todo_id, done)
        auth.writer()
    return {"todo": todo}


@router.delete("/api/todos/{todo_id}", status_code=204)
def todos_delete(
    todo_id: str,
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
) -> Response:
    with gate.authenticate(token) as auth:
        if not delete_todo(auth.account, todo_id):
            # Nothing removed, nothing to persist.
            raise NotFound()
        auth.writer()
    return Response(status_code=204)


# -----------------------------
# Admin
# -----------------------------


@router.get("/api/admin/overview")
def admin_overview(
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    with gate.authenticate(token, require_role=ROLE_ADMIN):
        return crud.overview(store)


@router.post("/api/admin/users", status_code=201)
def admin_create_user(
    payload: Optional[AdminCreateUserRequest] = None,
    token: Optional[str] = Depends(bearer_token),
    gate: Gate = Depends(get_gate),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    with gate.authenticate(token, require_role=ROLE_ADMIN):
        body = payload or AdminCreateUserRequest()

    # Provisioning takes both partition locks itself, so the gate's lock must
    # be released first.
    profile = crud.provision(
        store,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return {"profile": profile}


# -----------------------------
# Error rendering
# -----------------------------


def _error(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


async def _on_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    headers = None
    if isinstance(exc, (MissingToken, InvalidToken)):
        headers = {"WWW-Authenticate": "Bearer"}
    return _error(exc.status_code, exc.message, headers)


async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error(400, "validation-error")


async def _on_store_error(request: Request, exc: StoreError) -> JSONResponse:
    _debug(f"store error on {request.method} {request.url.path}: {exc}")
    return _error(500, "server-error")


async def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "not-found" if exc.status_code == 404 else str(exc.detail or "error").lower().replace(" ", "-")
    return _error(exc.status_code, message, getattr(exc, "headers", None))


async def _on_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    _debug(f"unexpected error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    return _error(500, "server-error")


# -----------------------------
# App factory
# -----------------------------


def create_app(cfg: Config | None = None) -> FastAPI:
    """Build the API.

    Storage is materialized and the seed admin created here, before the app
    serves any request. A corrupt partition file aborts startup.
    """
    cfg = cfg or load_config()

    store = Store(cfg.DATA_DIR)
    sessions = SessionRegistry()

    seeded = crud.ensure_seed_admin(store, cfg)
    if seeded:
        _debug(f"Bootstrapped seed admin: email={seeded.get('email')} id={seeded.get('id')}")

    app = FastAPI(title="Taskboard", version="0.1.0")
    app.state.cfg = cfg
    app.state.store = store
    app.state.sessions = sessions
    app.state.gate = Gate(store, sessions)

    origins = cfg.cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ServiceError, _on_service_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(StoreError, _on_store_error)
    app.add_exception_handler(StarletteHTTPException, _on_http_error)
    app.add_exception_handler(Exception, _on_unexpected_error)

    app.include_router(router)
    _debug(f"API ready data_dir={cfg.DATA_DIR} cors_origins={origins}")
    return app
