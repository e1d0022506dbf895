"""Input validators for request data.

Each validator returns the normalized value or raises a ``ValidationError``
carrying a themed suggested action for the error payload.
"""

import re
from pathlib import PurePath
from typing import Optional

from core.exceptions import ValidationError
from spooky.models.enums import HalloweenCharacter, LeaderboardCategory, QuizDifficulty

_ENTITY_ID = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

MAX_ID_LENGTH = 128
MIN_QUESTION_COUNT = 1
MAX_QUESTION_COUNT = 20

ALLOWED_UPLOAD_TYPES = {
    "text/plain": "text",
    "text/markdown": "text",
    "text/x-markdown": "text",
    "application/pdf": "pdf",
}
ALLOWED_EXTENSIONS = {".txt": "text", ".md": "text", ".markdown": "text", ".pdf": "pdf"}
GENERIC_UPLOAD_TYPES = {"", "application/octet-stream"}


def validate_entity_id(value: Optional[str], field: str = "id") -> str:
    """Validate ids that end up in file names to prevent path traversal.

    Raises:
        ValidationError: If the id is missing or has unsafe characters
    """
    if not value:
        raise ValidationError(
            f"{field} is required",
            suggested_action=f"Please provide a {field} so the spirits know what to look for!",
        )
    if len(value) > MAX_ID_LENGTH or not _ENTITY_ID.match(value):
        raise ValidationError(
            f"Invalid {field} format",
            suggested_action="Ids may only contain letters, numbers, hyphens and underscores.",
            details={field: value[:20]},
        )
    return value


def validate_content(content: Optional[str], min_length: int = 10, max_length: int = 10000) -> str:
    """Trim study text and check its length."""
    text = (content or "").strip()
    if len(text) < min_length:
        raise ValidationError(
            "Content too short",
            suggested_action=f"Please provide at least {min_length} characters of study material!",
            details={"length": len(text)},
        )
    if len(text) > max_length:
        raise ValidationError(
            "Content too long",
            suggested_action=f"Please keep your study material under {max_length} characters, "
            "or split it into smaller lessons!",
            details={"length": len(text)},
        )
    return text


def validate_difficulty(value: Optional[str]) -> QuizDifficulty:
    try:
        return QuizDifficulty((value or "medium").lower())
    except ValueError:
        raise ValidationError(
            "Invalid difficulty level",
            suggested_action="Please choose easy, medium, or hard difficulty!",
            details={"difficulty": str(value)[:20]},
        )


def validate_question_count(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if not MIN_QUESTION_COUNT <= value <= MAX_QUESTION_COUNT:
        raise ValidationError(
            "Invalid question count",
            suggested_action=f"Please ask for between {MIN_QUESTION_COUNT} and {MAX_QUESTION_COUNT} questions!",
            details={"questionCount": value},
        )
    return value


def validate_character(value: Optional[str]) -> HalloweenCharacter:
    if not value:
        raise ValidationError(
            "Character required",
            suggested_action="Please specify which spooky character is your favorite!",
        )
    try:
        return HalloweenCharacter(value.lower())
    except ValueError:
        raise ValidationError(
            "Invalid character",
            suggested_action="Please choose from: ghost, vampire, witch, skeleton, or pumpkin!",
            details={"character": value[:20]},
        )


def validate_leaderboard_category(value: Optional[str]) -> LeaderboardCategory:
    try:
        return LeaderboardCategory((value or "xp").lower())
    except ValueError:
        raise ValidationError(
            "Invalid leaderboard category",
            suggested_action="Please choose xp, level, streak, or badges!",
            details={"category": str(value)[:20]},
        )


def format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):g}MB"
    if size >= 1024:
        return f"{size / 1024:g}KB"
    return f"{size} bytes"


def validate_upload(filename: Optional[str], content_type: Optional[str], size: int, max_size: int) -> str:
    """Check an uploaded file's type and size.

    Returns:
        "text" or "pdf", the extraction strategy for the file

    Raises:
        ValidationError: If the file is too large or of an unsupported type
    """
    if size > max_size:
        raise ValidationError(
            "File too large",
            suggested_action=f"Please upload a file smaller than {format_size(max_size)}!",
            details={"size": size},
        )

    mime = (content_type or "").split(";")[0].strip().lower()
    kind = ALLOWED_UPLOAD_TYPES.get(mime)
    # Browsers send octet-stream for unknown extensions such as .md
    if kind is None and mime in GENERIC_UPLOAD_TYPES and filename:
        kind = ALLOWED_EXTENSIONS.get(PurePath(filename).suffix.lower())
    if kind is None:
        raise ValidationError(
            "Invalid file type",
            suggested_action="Please upload a text file (.txt), markdown file (.md), or PDF (.pdf)!",
            details={"contentType": content_type, "filename": (filename or "")[:50]},
        )
    return kind
