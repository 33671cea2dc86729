"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.translate import router as translate_router

__all__ = [
    "translate_router",
]
