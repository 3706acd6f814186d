from __future__ import annotations

import logging
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

import db
from config import _get_database_config, _get_store_config
from errors import ValidationError
from logging_config import setup_logging
from models import (
    LABEL_FIELD,
    LABEL_REQUIRED,
    CreateNodeRequest,
)
from store import get_node_store
from tree import TreeAssembler

logger = logging.getLogger(__name__)

app = FastAPI(title="label-tree-api")


@app.on_event("startup")
def startup() -> None:
    """Configure logging and make sure the trees table exists."""
    setup_logging()
    if _get_store_config()["backend"] == "postgres" and _get_database_config()["auto_create_schema"]:
        db.init_db()
        logger.info("Database schema ready")


def get_tree_assembler() -> TreeAssembler:
    return TreeAssembler(get_node_store())


# =============================================================================
# Error Responses
# =============================================================================

def _validation_response(messages: dict[str, list[str]]) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Validation failed", "messages": messages},
    )


def _request_error_messages(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group FastAPI request errors that concern the body as a whole.

    Field values are untyped in CreateNodeRequest, so only a missing,
    malformed or non-object body ends up here.
    """
    messages: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if part != "body"]

        if not loc and err.get("type") == "missing":
            # No request body at all
            key, reason = LABEL_FIELD, LABEL_REQUIRED
        else:
            key, reason = "body", err.get("msg", "Invalid request body.")

        reasons = messages.setdefault(key, [])
        if reason not in reasons:
            reasons.append(reason)
    return messages


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = _request_error_messages(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {messages}")
    return _validation_response(messages)


@app.exception_handler(ValidationError)
async def node_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return _validation_response(exc.messages)


# =============================================================================
# Core Endpoints
# =============================================================================

@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/tree", response_model=None)
def get_tree(assembler: TreeAssembler = Depends(get_tree_assembler)) -> list[dict[str, Any]] | JSONResponse:
    """Get every root node with its descendants nested under ``children``."""
    try:
        return assembler.list_forest()
    except Exception as e:
        logger.exception("Failed to retrieve trees")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to retrieve trees", "message": str(e)},
        )


@app.post("/tree", status_code=201, response_model=None)
def create_tree_node(
    payload: CreateNodeRequest,
    assembler: TreeAssembler = Depends(get_tree_assembler),
) -> dict[str, Any] | JSONResponse:
    """Create a node, as a root or under ``parentId``.

    Returns the full stored record, unlike GET /tree which returns only
    ``id``, ``label`` and ``children``.
    """
    try:
        node = assembler.create_node(payload.label, payload.parent_id)
    except ValidationError:
        raise
    except Exception as e:
        logger.exception("Failed to create tree node")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to create tree node", "message": str(e)},
        )
    return node.model_dump(mode="json")
