"""HTTP API for tripsheet."""
from .routes import router

__all__ = ["router"]
