"""FastAPI dependencies shared by the route handlers."""

from fastapi import Request

from config.settings import Settings, get_settings
from markup.languages import LanguageRegistry

__all__ = ["get_settings", "get_registry", "Settings"]


def get_registry(request: Request) -> LanguageRegistry:
    """Return the app's language registry, creating it on first use."""
    registry = getattr(request.app.state, "registry", None)
    if registry is None:
        registry = LanguageRegistry()
        request.app.state.registry = registry
    return registry
