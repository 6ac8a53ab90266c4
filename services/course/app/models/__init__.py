# Import all models so Alembic can discover them via Base.metadata
from .category import Category
from .chapter import Chapter
from .course import Course
from .purchase import Purchase
from .scorm_package import ScormPackage
from .scorm_tracking import ScormTracking
from .user_progress import UserProgress

__all__ = [
    "Category",
    "Chapter",
    "Course",
    "Purchase",
    "ScormPackage",
    "ScormTracking",
    "UserProgress",
]
