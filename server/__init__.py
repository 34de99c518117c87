"""
Server package exposing the FastAPI app and match registry.
"""

from .app import app  # noqa: F401
from .registry import MatchRegistry  # noqa: F401
