# Studio Routers Module
# Exports all modular API routers for the studio

from routers.applications import router as applications_router

__all__ = [
    'applications_router',
]
