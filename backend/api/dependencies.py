"""
Dependency injection for the API service.
Provides the shared upstream provider to route handlers.
"""
from __future__ import annotations

from ingest.providers.grassroots import GrassrootsProvider

# Module-level singleton, initialized at startup
_provider: GrassrootsProvider | None = None


def init_dependencies(provider: GrassrootsProvider) -> None:
    """Initialize module-level singletons. Called once at startup."""
    global _provider
    _provider = provider


def reset_dependencies() -> None:
    global _provider
    _provider = None


def get_provider() -> GrassrootsProvider:
    """FastAPI dependency: returns the shared GrassrootsProvider."""
    if _provider is None:
        raise RuntimeError("GrassrootsProvider not initialized; call init_dependencies first")
    return _provider
