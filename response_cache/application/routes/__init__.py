from .admin import ADMIN_ROUTES, router as admin_router

__all__ = ["ADMIN_ROUTES", "admin_router"]
