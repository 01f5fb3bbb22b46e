"""
Input sanitization for location fields.

All functions are pure and idempotent: applying them to their own output
returns the same value.
"""

import re
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlsplit

IMAGE_MAX_LENGTH = 500
ALLOWED_IMAGE_SCHEMES = ("http", "https")

_COMMENT_RE = re.compile(r"<!--.*?(-->|$)", re.DOTALL)
# A tag starts with "<" followed by a name, "/", "!" or "?"; an unterminated
# tag runs to the end of the string.
_TAG_RE = re.compile(r"<[A-Za-z/!?][^>]*(>|$)")
_UNSAFE_URL_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f]")


def strip_tags(value: str) -> str:
    """Remove markup tags and comments, keeping inner text, then trim."""
    text = _COMMENT_RE.sub("", value)
    # Removing one tag can join the halves of another ("<<b>i>"), so repeat
    while True:
        stripped = _TAG_RE.sub("", text)
        if stripped == text:
            break
        text = stripped
    return text.strip()


def normalize_image_url(value: Optional[str]) -> Optional[str]:
    """
    Validate and normalize an image URL.

    Blank values become None. Anything kept must be an absolute http(s)
    URL with a host and no whitespace or control characters; the URL is
    otherwise returned unchanged.

    Raises:
        ValueError: If the value is not an acceptable URL
    """
    if value is None:
        return None
    url = value.strip()
    if not url:
        return None
    if len(url) > IMAGE_MAX_LENGTH:
        raise ValueError(f"The image may not be greater than {IMAGE_MAX_LENGTH} characters.")
    if _UNSAFE_URL_CHARS_RE.search(url):
        raise ValueError("The image URL must not contain whitespace or control characters.")
    parsed = urlsplit(url)
    if parsed.scheme.lower() not in ALLOWED_IMAGE_SCHEMES or not parsed.netloc:
        raise ValueError("The image must be a valid http or https URL.")
    return url


def sanitize_location_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Sanitize the location fields present in ``data``.

    Absent fields stay absent so partial updates only touch what was sent;
    unknown keys are dropped.

    Raises:
        ValueError: If ``image`` is present and not an acceptable URL
    """
    sanitized: Dict[str, Any] = {}

    for field in ("code", "name"):
        if field in data and data[field] is not None:
            sanitized[field] = strip_tags(str(data[field]))

    if "image" in data:
        sanitized["image"] = normalize_image_url(data["image"])

    return sanitized
