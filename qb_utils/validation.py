import re
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# user-facing messages
ERRORS = {
    "method": "Method not allowed",
    "invalid": "Invalid quiz document",
    "too_large": "Quiz file is too large",
    "upload_failed": "Failed to upload JSON",
    "not_found": "Not Found",
    "server_error": "Internal Server Error",
}

QUIZ_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def is_valid_quiz_id(quiz_id: Optional[str]) -> bool:
    """
    Quiz ids double as filenames, so only plain word characters and dashes
    are accepted. Anything else (path separators, dots, empty) is rejected.
    """
    if not quiz_id or not QUIZ_ID_PATTERN.fullmatch(quiz_id):
        logger.debug("Rejected quiz id: %r", quiz_id)
        return False
    return True


def default_title(quiz_id: str) -> str:
    """Placeholder title for quizzes uploaded without one."""
    return f"Quiz {quiz_id}"
