"""Dependency helpers for the scanner gateway."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from ...config import Settings
from ...service import ScannerService


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()


def get_service(request: Request) -> ScannerService:
    return request.app.state.service
