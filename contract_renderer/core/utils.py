from __future__ import annotations

"""Simple reusable helper functions for mention values.

These helpers are side-effect-free and contain no rendering or disk I/O; they
can be used across all layers of the package.
"""

from dataclasses import dataclass, field
import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional

from contract_renderer.config import ConfigManager
from contract_renderer.core.models import MentionRecord, ValidationResult, VALID

__all__ = [
    "hex_to_rgb",
    "normalize_color",
    "sanitize_mention_value",
    "xml_safe_text",
    "validate_mention_value",
    "group_mentions_by_type",
    "get_mention_statistics",
    "MentionStatistics",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_TEXT_LENGTH = 200

_HEX_COLOR = re.compile(r"#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
# An "&" that already opens one of the entities produced below is left alone
_SPECIAL_CHARS = re.compile(r"&(?!(?:lt|gt|amp|quot|#x27);)|[<>\"']")
_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    "&": "&amp;",
    '"': "&quot;",
    "'": "&#x27;",
}
_DATE = re.compile(r"\w+\s+\d{1,2},\s+\d{4}")
_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# Decimal or 0x/0o/0b literal, ASCII digits only
_NUMBER = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+",
    re.ASCII,
)
# Code points XML 1.0 cannot carry; tab, newline and carriage return are allowed
_XML_INCOMPATIBLE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")
_SOFT_BREAKS = re.compile(r"[\x0b\x0c]")


# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------

def hex_to_rgb(hex_color: str) -> str:
    """Convert a 6-digit hex colour to ``rgb(R, G, B)`` notation.

    The leading ``#`` is optional. Anything that is not exactly six hex digits
    (short ``#fff`` forms, named colours, ``rgb(...)`` strings) is returned
    unchanged.

    Examples:
        >>> hex_to_rgb("#ff0000")
        'rgb(255, 0, 0)'
        >>> hex_to_rgb("not-a-color")
        'not-a-color'
    """
    if not isinstance(hex_color, str):
        return hex_color
    match = _HEX_COLOR.fullmatch(hex_color)
    if match is None:
        return hex_color
    r, g, b = (int(channel, 16) for channel in match.groups())
    return f"rgb({r}, {g}, {b})"


def normalize_color(color: Any) -> Any:
    """Return *color* in the registry's storage form.

    Only ``#``-prefixed strings are converted; other values are stored as
    given so that ``rgb(...)`` and named colours survive untouched.
    """
    if isinstance(color, str) and color.startswith("#"):
        return hex_to_rgb(color)
    return color


# ---------------------------------------------------------------------------
# Sanitisation and validation
# ---------------------------------------------------------------------------

def xml_safe_text(value: Any, soft_break: str = "\n") -> str:
    r"""Return *value* as a string that lxml accepts as text or attribute.

    Vertical tab and form feed (the soft line and page breaks of word
    processors) become *soft_break*; every other code point XML 1.0 cannot
    hold is dropped. ``None`` yields ``""`` and other non-strings are passed
    through ``str()``.

    Examples:
        >>> xml_safe_text("line\x0bbreak")
        'line\nbreak'
        >>> xml_safe_text("nul\x00byte")
        'nulbyte'
    """
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    return _XML_INCOMPATIBLE.sub("", _SOFT_BREAKS.sub(soft_break, text))


def sanitize_mention_value(value: Any) -> str:
    """Return a display-safe version of *value*.

    Steps, in order: drop control characters XML cannot carry (soft breaks
    become spaces), drop anything shaped like an HTML tag, escape the five
    HTML-special characters to named entities, trim surrounding whitespace.
    Tag removal runs first, so ``"<script>"`` becomes ``""`` rather than an
    escaped literal. Non-string input yields ``""``.
    """
    if not isinstance(value, str):
        return ""
    stripped = _TAG.sub("", xml_safe_text(value, soft_break=" "))
    escaped = _SPECIAL_CHARS.sub(lambda m: _ESCAPES[m.group(0)[0]], stripped)
    return escaped.strip()


def _max_text_length() -> int:
    rules = ConfigManager().get_validation_rules()
    try:
        return int(rules.get("max_text_length", DEFAULT_MAX_TEXT_LENGTH))
    except (TypeError, ValueError):
        logger.warning("Config: invalid max_text_length=%r, using default", rules.get("max_text_length"))
        return DEFAULT_MAX_TEXT_LENGTH


def _is_finite_number(value: str) -> bool:
    candidate = value.strip()
    if not _NUMBER.fullmatch(candidate):
        return False
    if candidate[:2].lower() in ("0x", "0o", "0b"):
        return True
    return math.isfinite(float(candidate))


def validate_mention_value(
    value: Any,
    variable_type: Optional[str],
    *,
    max_text_length: Optional[int] = None,
) -> ValidationResult:
    """Check *value* against the rules for *variable_type*.

    Args:
        value: Current (sanitised) mention value.
        variable_type: ``date``, ``number``, ``email``, ``text`` or anything
            else; matched case-insensitively. Unknown types and ``None`` are
            treated as free text.
        max_text_length: Limit for free text. Defaults to the configured
            ``max_text_length`` (200).

    Returns:
        A :class:`ValidationResult`; ``error`` holds a human-readable reason
        when ``is_valid`` is False.
    """
    if not value or not isinstance(value, str):
        return ValidationResult(False, "Value is required")

    kind = variable_type.lower() if isinstance(variable_type, str) else None

    if kind == "date":
        if not _DATE.fullmatch(value):
            return ValidationResult(False, 'Date must be in format "Month DD, YYYY"')
    elif kind == "number":
        if not _is_finite_number(value):
            return ValidationResult(False, "Value must be a valid number")
    elif kind == "email":
        if not _EMAIL.fullmatch(value):
            return ValidationResult(False, "Value must be a valid email address")
    else:
        limit = max_text_length if max_text_length is not None else _max_text_length()
        if len(value) > limit:
            return ValidationResult(False, f"Value is too long (max {limit} characters)")

    return VALID


# ---------------------------------------------------------------------------
# Reporting helpers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MentionStatistics:
    """Summary figures over a set of mention records."""

    total: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    unique_values: int = 0
    average_value_length: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "byType": dict(self.by_type),
            "uniqueValues": self.unique_values,
            "averageValueLength": self.average_value_length,
        }


def group_mentions_by_type(records: Mapping[str, MentionRecord]) -> Dict[str, List[Dict[str, Any]]]:
    """Group mention records by variable type (``"text"`` when unset).

    Each entry is the record's dictionary form plus its ``id``; insertion
    order follows *records*.
    """
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for mention_id, record in records.items():
        kind = record.variable_type or "text"
        groups.setdefault(kind, []).append({"id": mention_id, **record.to_dict()})
    return groups


def get_mention_statistics(records: Mapping[str, MentionRecord]) -> MentionStatistics:
    """Return totals, per-type counts, distinct values and mean value length."""
    if not records:
        return MentionStatistics()
    values = [record.value or "" for record in records.values()]
    groups = group_mentions_by_type(records)
    mean_length = sum(len(v) for v in values) / len(values)
    return MentionStatistics(
        total=len(values),
        by_type={kind: len(entries) for kind, entries in groups.items()},
        unique_values=len(set(values)),
        # Half-up rounding, not Python's banker's rounding
        average_value_length=int(math.floor(mean_length + 0.5)),
    )
