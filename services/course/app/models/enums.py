import enum

from sqlalchemy.dialects.postgresql import ENUM as PgEnum


class ScormCompletionStatus(str, enum.Enum):
    NOT_ATTEMPTED = "NOT_ATTEMPTED"
    INCOMPLETE = "INCOMPLETE"
    COMPLETED = "COMPLETED"
    PASSED = "PASSED"
    FAILED = "FAILED"


scorm_completion_status_enum = PgEnum(
    ScormCompletionStatus, name="scorm_completion_status", create_type=True
)
