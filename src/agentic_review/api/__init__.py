"""Agentic Review HTTP API."""

from .main import create_app
from .session_manager import ReviewSessionManager, get_session_manager

__all__ = ["create_app", "ReviewSessionManager", "get_session_manager"]
