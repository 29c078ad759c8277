"""Value cleanup shared by the stages."""

import json
import re
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

_TAG = re.compile(r"<[^>]*>")
_ENTITY = re.compile(r"&[a-zA-Z]+;")
_WHITESPACE = re.compile(r"\s+")


def strip_html(value: str | None) -> str | None:
    """Remove tags and named entities and collapse whitespace."""
    if value is None:
        return None
    text = _TAG.sub("", value)
    text = _ENTITY.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def parse_json(value: str | None, **log_context) -> Any:
    """Parse an opaque JSON column; None when empty or malformed."""
    if value is None or not value.strip():
        return None
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("Malformed JSON column ignored", **log_context)
        return None
