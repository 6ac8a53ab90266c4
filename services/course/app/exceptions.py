"""Domain exception classes for the course service.

Raised by service-layer code and caught by controllers, which map them
to HTTP responses. The access resolver never lets any of these escape.
"""


class CourseNotFoundError(Exception):
    """Raised when a course cannot be found by ID."""

    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"Course not found: {identifier}")


class ChapterNotFoundError(Exception):
    def __init__(self, chapter_id: str = ""):
        self.chapter_id = chapter_id
        super().__init__(f"Chapter not found: {chapter_id}")


class PurchaseNotFoundError(Exception):
    def __init__(self, course_id: str = ""):
        self.course_id = course_id
        super().__init__(f"Purchase not found for course: {course_id}")


class ScormPackageNotFoundError(Exception):
    def __init__(self, course_id: str = ""):
        self.course_id = course_id
        super().__init__(f"SCORM package not found for course: {course_id}")


class AlreadyPurchasedError(Exception):
    """Raised when a user enrolls in a course they already own."""


class NotPurchasedError(Exception):
    """Raised when an operation requires an entitlement that does not exist."""


class CourseNotPublishedError(Exception):
    """Raised when enrollment is attempted on an unpublished course."""


class PaymentRequiredError(Exception):
    """Raised when self-enrolling in a paid course."""


class NotCourseOwnerError(Exception):
    """Raised when someone other than the instructor modifies a course."""


class CourseNotReadyError(Exception):
    """Raised when publishing a course that is missing required content."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")


class ContentNotAccessibleError(Exception):
    """Raised when a user opens paid content without a purchase."""


class ChapterNotReadyError(Exception):
    """Raised when publishing a chapter that is missing required content."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")
