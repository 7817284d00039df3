"""Route handler groups, one per access level.

- PublicRoutes - /api/trends, /api/trends/{id}, /api/categories
- UserRoutes - /api/user/... (authenticated)
- AdminRoutes - /api/admin/trends... (admin role)
"""
from tech_trends.routers.admin import AdminRoutes
from tech_trends.routers.public import PublicRoutes
from tech_trends.routers.user import UserRoutes

__all__ = [
    "AdminRoutes",
    "PublicRoutes",
    "UserRoutes",
]
