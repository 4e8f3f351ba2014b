from app.router.api.auth import router as auth_router
from app.router.api.schools import router as schools_router
from app.router.api.tickets import router as tickets_router
from app.router.api.students import router as students_router
from app.router.api.student import router as student_router
from app.router.api.catalog import router as catalog_router

__all__ = [
    "auth_router",
    "schools_router",
    "tickets_router",
    "students_router",
    "student_router",
    "catalog_router",
]
