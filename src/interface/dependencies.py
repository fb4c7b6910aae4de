"""FastAPI dependencies shared by the routers."""

import logging

from fastapi import Depends, HTTPException, Query, Request, status

from src.agents.completion_provider import CompletionProvider
from src.agents.retry_handler import RetryPolicy
from src.core.config import constants
from src.core.record_store import RecordStore, SQLiteRecordStore
from src.interpreter import PantryInterpreter, TaskExecutor


logger = logging.getLogger(__name__)


def get_record_store() -> RecordStore:
    """Provide the SQLite-backed record store."""
    return SQLiteRecordStore(page_size=constants.DEFAULT_PER_PAGE_LIMIT)


def get_completion_provider(request: Request) -> CompletionProvider:
    """Provide the completion provider built at startup."""
    provider = getattr(request.app.state, "completion_provider", None)
    if provider is None:
        logger.error("completion_provider_missing", extra={"path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Assistant is not configured.",
        )
    return provider


def get_interpreter(
    provider: CompletionProvider = Depends(get_completion_provider),
    store: RecordStore = Depends(get_record_store),
) -> PantryInterpreter:
    """Assemble an interpreter for one request."""
    return PantryInterpreter(provider=provider, executor=TaskExecutor(store, RetryPolicy.from_settings()))


def require_owner_id(owner_id: str | None = Query(default=None)) -> str:
    """Reject requests that carry no owning user identity."""
    if not owner_id or not owner_id.strip():
        logger.warning("owner_id_missing")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=constants.AUTH_REQUIRED_MESSAGE)
    return owner_id
