"""API package: provides FastAPI dependencies and route definitions for the application."""

from .dependencies import get_current_user, get_workspace_context, require_action  # noqa: F401
from .routes import router  # noqa: F401
