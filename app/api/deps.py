"""Shared FastAPI dependencies."""

from fastapi import Header

from app.core.config import get_settings


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Caller identity from X-User-Id; single-user installs fall back to the configured default."""
    return x_user_id or get_settings().default_user_id
