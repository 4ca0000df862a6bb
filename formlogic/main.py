"""FastAPI application factory for the form logic service."""

from __future__ import annotations

from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from formlogic.config import AppConfig, load_config
from formlogic.http.problem import (
    handle_malformed_definition,
    handle_request_validation_error,
    handle_submission_rejected,
    handle_unexpected_error,
)
from formlogic.logging_setup import configure_logging
from formlogic.logic.errors import MalformedDefinitionError, SubmissionRejected
from formlogic.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the app; `config` defaults to `load_config()`."""
    configure_logging()
    cfg = config or load_config()

    app = FastAPI(title="Form Logic Engine", version="0.1.0")
    app.state.config = cfg

    app.add_exception_handler(SubmissionRejected, handle_submission_rejected)
    app.add_exception_handler(MalformedDefinitionError, handle_malformed_definition)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(api_router, prefix=cfg.api.prefix)
    logger.info(
        "app_created prefix=%s max_condition_depth=%s",
        cfg.api.prefix or "/",
        cfg.engine.max_condition_depth,
    )
    return app


__all__ = ["create_app"]
