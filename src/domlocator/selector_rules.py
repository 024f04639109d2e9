from __future__ import annotations

import re
from typing import Sequence

TEST_ID_ATTRIBUTES = (
    "data-testid",
    "data-test-id",
    "data-cy",
    "data-test",
)

# Overlay nodes injected by the inspector carry this prefix on ids and classes.
EXCLUDED_CLASS_PREFIX = "dom-agent-"

TEXT_MIN_LENGTH = 3
TEXT_MAX_LENGTH = 50
NAME_TEXT_LIMIT = 100

CSS_MAX_DEPTH = 5
CSS_MAX_CLASSES = 2

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
INTERACTIVE_TAGS = frozenset({"button", "a", "input", "select", "textarea", "details", "summary"})

_WHITESPACE = re.compile(r"\s+")


def normalize_space(value: str | None, limit: int = 200) -> str:
    if not value:
        return ""
    compact = _WHITESPACE.sub(" ", str(value)).strip()
    return compact[:limit] if compact else ""


def normalize_classes(raw: Sequence[str] | str | None) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        items = raw.split()
    else:
        items = [item for item in raw if isinstance(item, str)]

    seen: set[str] = set()
    normalized: list[str] = []
    for item in items:
        clean = item.strip()
        if not clean or clean in seen:
            continue
        seen.add(clean)
        normalized.append(clean)
    return normalized


def is_excluded_class(class_name: str, prefix: str = EXCLUDED_CLASS_PREFIX) -> bool:
    return bool(prefix) and class_name.startswith(prefix)


def usable_classes(
    classes: Sequence[str],
    *,
    limit: int = CSS_MAX_CLASSES,
    prefix: str = EXCLUDED_CLASS_PREFIX,
) -> list[str]:
    kept = [name for name in normalize_classes(classes) if not is_excluded_class(name, prefix)]
    return kept[: max(0, limit)]


def escape_locator_string(value: str) -> str:
    return value.replace("'", "\\'").replace('"', '\\"')


def collapsed_text(value: str | None, limit: int = NAME_TEXT_LIMIT) -> str | None:
    """Whitespace-collapsed text, or None when empty or longer than ``limit``."""
    text = normalize_space(value, limit=limit + 1)
    if not text or len(text) > limit:
        return None
    return text
