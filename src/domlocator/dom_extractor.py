from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from .models import DomTreeBuilder, ElementDescriptor

if TYPE_CHECKING:
    from playwright.sync_api import ElementHandle

LOGGER = logging.getLogger("domlocator.capture")

_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)

ELEMENT_PAYLOAD_SCRIPT = """
(el) => {
  const collapse = (value) => (value || '').replace(/\\s+/g, ' ').trim();
  const attributesOf = (node) => {
    const attrs = {};
    for (const attr of Array.from(node.attributes || [])) {
      attrs[attr.name] = attr.value;
    }
    return attrs;
  };
  const siblingFacts = (node) => {
    const parent = node.parentElement;
    if (!parent) {
      return { position: 1, siblingCount: 1, sameTagIndex: 1, sameTagCount: 1 };
    }
    const children = Array.from(parent.children);
    const sameTag = children.filter((child) => child.tagName === node.tagName);
    return {
      position: children.indexOf(node) + 1,
      siblingCount: children.length,
      sameTagIndex: sameTag.indexOf(node) + 1,
      sameTagCount: sameTag.length,
    };
  };

  let labelText = null;
  if (el.labels && el.labels.length) {
    labelText = collapse(el.labels[0].textContent);
  } else if (el.parentElement && el.parentElement.closest('label')) {
    labelText = collapse(el.parentElement.closest('label').textContent);
  }

  const ancestry = [];
  let current = el.parentElement;
  while (current && current.nodeType === Node.ELEMENT_NODE) {
    ancestry.push({
      tag: current.tagName.toLowerCase(),
      attributes: attributesOf(current),
      ...siblingFacts(current),
    });
    current = current.parentElement;
  }

  return {
    tag: el.tagName.toLowerCase(),
    attributes: attributesOf(el),
    text: (el.textContent || '').trim(),
    labelText: labelText || null,
    ancestry,
    ...siblingFacts(el),
  };
}
"""


class PayloadError(ValueError):
    """Raised when a serialized element payload does not match the wire format."""


class CaptureError(RuntimeError):
    """Raised when a live element cannot be captured."""


def is_missing_browser_error(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def _to_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def _attributes(raw: Any, where: str) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise PayloadError(f"{where}: 'attributes' must be an object.")
    return {str(key): "" if value is None else str(value) for key, value in raw.items() if str(key)}


def _tag(raw: Mapping[str, Any], where: str) -> str:
    tag = raw.get("tag")
    if not isinstance(tag, str) or not tag.strip():
        raise PayloadError(f"{where}: 'tag' must be a non-empty string.")
    return tag.strip().lower()


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _sibling_hints(raw: Mapping[str, Any]) -> dict[str, int | None]:
    return {
        "position_hint": _to_int(raw.get("position")),
        "sibling_count_hint": _to_int(raw.get("siblingCount")),
        "same_tag_index_hint": _to_int(raw.get("sameTagIndex")),
        "same_tag_count_hint": _to_int(raw.get("sameTagCount")),
    }


def _descriptor_from_ancestry(payload: Mapping[str, Any]) -> ElementDescriptor:
    ancestry = payload.get("ancestry") or []
    if not isinstance(ancestry, list):
        raise PayloadError("'ancestry' must be a list ordered from parent to root.")

    builder = DomTreeBuilder()
    parent: int | None = None
    for depth, item in enumerate(reversed(ancestry)):
        where = f"ancestry[{len(ancestry) - 1 - depth}]"
        if not isinstance(item, Mapping):
            raise PayloadError(f"{where}: expected an object.")
        parent = builder.add(
            _tag(item, where),
            _attributes(item.get("attributes"), where),
            str(item.get("text") or ""),
            parent,
            **_sibling_hints(item),
        )

    index = builder.add(
        _tag(payload, "element"),
        _attributes(payload.get("attributes"), "element"),
        str(payload.get("text") or ""),
        parent,
        label_text=_optional_text(payload.get("labelText")),
        **_sibling_hints(payload),
    )
    return builder.build().descriptor(index)


def _descriptor_from_nodes(payload: Mapping[str, Any]) -> ElementDescriptor:
    nodes = payload.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        raise PayloadError("'nodes' must be a non-empty list.")

    builder = DomTreeBuilder()
    for position, item in enumerate(nodes):
        where = f"nodes[{position}]"
        if not isinstance(item, Mapping):
            raise PayloadError(f"{where}: expected an object.")
        parent = item.get("parent")
        if parent is not None and (isinstance(parent, bool) or not isinstance(parent, int)):
            raise PayloadError(f"{where}: 'parent' must be an integer index or null.")
        try:
            builder.add(
                _tag(item, where),
                _attributes(item.get("attributes"), where),
                str(item.get("text") or ""),
                parent,
                label_text=_optional_text(item.get("labelText")),
            )
        except ValueError as exc:
            raise PayloadError(f"{where}: {exc}") from exc

    target = payload.get("target", len(nodes) - 1)
    if isinstance(target, bool) or not isinstance(target, int) or not 0 <= target < len(nodes):
        raise PayloadError("'target' must index into 'nodes'.")
    return builder.build().descriptor(target)


def descriptor_from_payload(payload: Any) -> ElementDescriptor:
    """Build a descriptor from a serialized element.

    Two shapes are accepted: an element with an ``ancestry`` chain (what
    :data:`ELEMENT_PAYLOAD_SCRIPT` produces) or an explicit arena of ``nodes``
    with parent indexes and a ``target`` index.
    """
    if not isinstance(payload, Mapping):
        raise PayloadError("Element payload must be a JSON object.")
    if "nodes" in payload:
        return _descriptor_from_nodes(payload)
    return _descriptor_from_ancestry(payload)


def extract_element_payload(element: ElementHandle) -> dict[str, Any]:
    payload = element.evaluate(ELEMENT_PAYLOAD_SCRIPT)
    if not isinstance(payload, dict):
        raise CaptureError("Element serialization returned no data.")
    return payload


def extract_element_descriptor(element: ElementHandle) -> ElementDescriptor:
    return descriptor_from_payload(extract_element_payload(element))


def capture_from_url(url: str, selector: str, *, headless: bool = True, timeout_ms: int = 30000) -> ElementDescriptor:
    from playwright.sync_api import Error as PlaywrightError
    from playwright.sync_api import sync_playwright

    LOGGER.info("Capturing %s from %s", selector, url)
    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=headless)
            try:
                page = browser.new_page()
                page.goto(url, timeout=timeout_ms)
                element = page.query_selector(selector)
                if element is None:
                    raise CaptureError(f"Selector matched no element: {selector}")
                payload = extract_element_payload(element)
            finally:
                browser.close()
    except PlaywrightError as exc:
        if is_missing_browser_error(exc):
            raise CaptureError("Chromium is not installed. Run `playwright install chromium`.") from exc
        raise CaptureError(f"Capture failed: {exc}") from exc
    return descriptor_from_payload(payload)
