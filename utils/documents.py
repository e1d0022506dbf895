"""Text extraction for uploaded study material (.txt, .md, .pdf)."""

import io

import pypdf
from pypdf.errors import PdfReadError

from core.exceptions import ValidationError


def extract_text(data: bytes, kind: str) -> str:
    """Return the text of an uploaded file.

    Args:
        data: Raw file bytes
        kind: "text" or "pdf" (from ``validate_upload``)

    Raises:
        ValidationError: If the file cannot be decoded
    """
    if kind == "pdf":
        try:
            reader = pypdf.PdfReader(io.BytesIO(data))
            return "\n".join(page.extract_text() or "" for page in reader.pages)
        except PdfReadError as e:
            raise ValidationError(
                "Could not read PDF file",
                suggested_action="Please upload a text-based PDF, or paste the text directly!",
            ) from e

    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError(
            "File is not valid UTF-8 text",
            suggested_action="Please save your notes as UTF-8 text and try again!",
        ) from e
