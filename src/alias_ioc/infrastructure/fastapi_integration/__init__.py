"""
FastAPI integration module.

Provides helpers for resolving container aliases in FastAPI endpoints.
"""

from .integration import create_fastapi_dependency, inject_dependencies

__all__ = [
    "create_fastapi_dependency",
    "inject_dependencies",
]
