"""APIRouter registration for the form logic service."""

from __future__ import annotations

from fastapi import APIRouter

from formlogic.routes.forms import router as forms_router

api_router = APIRouter()
api_router.include_router(forms_router, tags=["FormLogic"])

__all__ = ["api_router"]
