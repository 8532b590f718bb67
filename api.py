import os
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Body, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from config import settings
from database import get_db_connection
from store import (
    ContactMessageStore,
    DuplicateEmail,
    NotFound,
    StoreError,
    UserStore,
    ValidationError,
)
from validators import validate_contact_message, validate_user

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


# --- Models ---
class UserModel(BaseModel):
    id: int
    full_name: str
    email: str
    phone: str
    role: str


class ContactMessageModel(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: Optional[str] = None


class MessageModel(BaseModel):
    message: str


# --- Dependencies ---
def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_contact_store(request: Request) -> ContactMessageStore:
    return request.app.state.contact_store


def _require_valid(errors: List[str]) -> None:
    if errors:
        raise ValidationError(errors)


def _parse_id(raw: str, not_found: str) -> int:
    """Ids that are not plain integers cannot match a row."""
    try:
        return int(raw)
    except ValueError:
        raise NotFound(not_found) from None


# --- Error handlers ---
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _validation_error_handler(request: Request, exc: ValidationError):
    return _error(400, str(exc))


async def _duplicate_email_handler(request: Request, exc: DuplicateEmail):
    return _error(400, str(exc))


async def _not_found_handler(request: Request, exc: NotFound):
    return _error(404, str(exc))


async def _store_error_handler(request: Request, exc: StoreError):
    # The sqlite cause is already logged by the store.
    return _error(500, str(exc))


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON and non-object bodies."""
    return _error(400, "Request body must be a JSON object")


# --- Routes ---
def register_routes(app: FastAPI) -> None:

    @app.get("/health")
    async def health():
        """Lightweight health check; also pings the database."""
        db_ok = True
        try:
            conn = get_db_connection(app.state.user_store.db_file)
            try:
                conn.execute("SELECT 1")
            finally:
                conn.close()
        except Exception as e:
            logger.error(f"Health check database ping failed: {e}")
            db_ok = False
        return {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "db": db_ok,
            "version": settings.app_version,
        }

    # Users
    @app.get("/api/users", response_model=List[UserModel])
    def list_users(store: UserStore = Depends(get_user_store)):
        return [u.to_dict() for u in store.list_users()]

    @app.post("/api/users", response_model=UserModel, status_code=201)
    def add_user(payload: Dict[str, Any] = Body(...), store: UserStore = Depends(get_user_store)):
        _require_valid(validate_user(payload))
        return store.insert(payload).to_dict()

    @app.put("/api/users/{user_id}", response_model=MessageModel)
    def edit_user(user_id: str, payload: Dict[str, Any] = Body(...),
                  store: UserStore = Depends(get_user_store)):
        _require_valid(validate_user(payload, is_update=True))
        store.update(_parse_id(user_id, "User not found"), payload)
        return {"message": "User updated successfully"}

    @app.delete("/api/users/{user_id}", response_model=MessageModel)
    def delete_user(user_id: str, store: UserStore = Depends(get_user_store)):
        store.delete(_parse_id(user_id, "User not found"))
        return {"message": "User deleted successfully"}

    # Contact messages
    @app.get("/api/contacts", response_model=List[ContactMessageModel])
    def list_contacts(store: ContactMessageStore = Depends(get_contact_store)):
        return [m.to_dict() for m in store.list_messages()]

    @app.post("/api/contacts", response_model=ContactMessageModel, status_code=201)
    def submit_contact(payload: Dict[str, Any] = Body(...),
                       store: ContactMessageStore = Depends(get_contact_store)):
        _require_valid(validate_contact_message(payload))
        return store.insert(payload).to_dict()

    @app.delete("/api/contacts/{message_id}", response_model=MessageModel)
    def delete_contact(message_id: str, store: ContactMessageStore = Depends(get_contact_store)):
        store.delete(_parse_id(message_id, "Message not found"))
        return {"message": "Message deleted successfully"}


def create_app(db_file: Optional[str] = None, static_dir: Optional[str] = None) -> FastAPI:
    """Build the API around stores bound to ``db_file``."""
    app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug)

    app.state.user_store = UserStore(db_file)
    app.state.contact_store = ContactMessageStore(app.state.user_store.db_file)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(DuplicateEmail, _duplicate_email_handler)
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(StoreError, _store_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    register_routes(app)

    # Mounted last so the API routes take precedence over the frontend build.
    static_dir = static_dir or settings.static_dir
    if static_dir and os.path.isdir(static_dir):
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info(f"Serving static files from {static_dir}")

    return app
