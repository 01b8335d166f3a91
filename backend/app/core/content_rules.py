"""Content rules shared by the API and the client-side editor.

Standard library only, so the editor can apply them before talking to the
server.
"""

from __future__ import annotations

import math
import re

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_TAG_RE = re.compile(r"<[^>]*>")


class UploadRuleError(ValueError):
    pass


def has_text(text: str | None) -> bool:
    """True when rich text has visible content once markup is stripped."""
    if not text:
        return False
    return bool(_TAG_RE.sub("", text).replace("&nbsp;", " ").strip())


def format_megabytes(size_bytes: int | float) -> str:
    return f"{size_bytes / (1024 * 1024):.2f}"


def check_upload(file_type: object, file_size: object, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Raise UploadRuleError unless the declared file may be uploaded.

    ``file_size`` must be a real JSON number; strings and booleans count as
    missing.
    """
    if (
        not isinstance(file_type, str)
        or not file_type
        or isinstance(file_size, bool)
        or not isinstance(file_size, (int, float))
    ):
        raise UploadRuleError("fileType and fileSize are required")
    if file_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRuleError("Invalid file type. Allowed: JPEG, PNG, WebP, GIF")
    if not math.isfinite(file_size):
        raise UploadRuleError("Invalid file size")
    if file_size > max_bytes:
        max_mb = max_bytes // (1024 * 1024)
        raise UploadRuleError(
            f"File is too large ({format_megabytes(file_size)} MB). Maximum file size is {max_mb} MB."
        )
    if file_size <= 0:
        raise UploadRuleError("Invalid file size")
