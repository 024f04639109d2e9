from __future__ import annotations

import logging

from .models import ElementDescriptor
from .selector_rules import HEADING_TAGS, collapsed_text

LOGGER = logging.getLogger("domlocator.roles")

IMPLICIT_ROLES: dict[str, str] = {
    "button": "button",
    "textarea": "textbox",
    "select": "combobox",
}

INPUT_TYPE_ROLES: dict[str, str] = {
    "button": "button",
    "submit": "button",
    "checkbox": "checkbox",
    "radio": "radio",
    "text": "textbox",
    "password": "textbox",
    "email": "textbox",
    "search": "searchbox",
}


def _is_link(descriptor: ElementDescriptor) -> bool:
    return descriptor.tag_name == "a" and bool(descriptor.attributes.get("href"))


def input_role(descriptor: ElementDescriptor) -> str:
    input_type = (descriptor.attributes.get("type") or "text").strip().lower()
    return INPUT_TYPE_ROLES.get(input_type, "textbox")


def implicit_role(descriptor: ElementDescriptor) -> str | None:
    tag = descriptor.tag_name
    if tag == "input":
        return input_role(descriptor)
    if tag == "a":
        return "link" if _is_link(descriptor) else None
    if tag in HEADING_TAGS:
        return "heading"
    return IMPLICIT_ROLES.get(tag)


class RoleResolver:
    """Infers ARIA role and accessible name from a descriptor snapshot.

    No live accessibility tree is consulted. Missing information yields ``None``,
    which callers treat as "strategy not applicable".
    """

    def resolve_role(self, descriptor: ElementDescriptor) -> str | None:
        explicit = descriptor.attr("role")
        if explicit:
            return explicit
        return implicit_role(descriptor)

    def resolve_accessible_name(self, descriptor: ElementDescriptor) -> str | None:
        aria_label = descriptor.attr("aria-label")
        if aria_label:
            return aria_label

        label = self.label_text(descriptor)
        if label:
            return label

        if descriptor.tag_name == "button" or _is_link(descriptor):
            text = collapsed_text(descriptor.text_content)
            if text:
                return text

        if descriptor.tag_name == "img":
            alt = descriptor.attr("alt")
            if alt:
                return alt

        return descriptor.attr("title")

    def label_text(self, descriptor: ElementDescriptor) -> str | None:
        precomputed = collapsed_text(descriptor.label_text)
        if precomputed:
            return precomputed

        element_id = descriptor.id
        if element_id:
            tree = descriptor.tree
            for index in tree.find_by_tag("label"):
                node = tree.node(index)
                if node.attributes.get("for") != element_id:
                    continue
                text = collapsed_text(node.text_content)
                if text:
                    return text

        for ancestor in descriptor.ancestors():
            if ancestor.tag_name != "label":
                continue
            text = collapsed_text(ancestor.text_content)
            if text:
                return text
            # Only the nearest wrapping label counts.
            break

        LOGGER.debug("No label associated with <%s> at index %s", descriptor.tag_name, descriptor.index)
        return None


_DEFAULT_RESOLVER = RoleResolver()


def resolve_role(descriptor: ElementDescriptor) -> str | None:
    return _DEFAULT_RESOLVER.resolve_role(descriptor)


def resolve_accessible_name(descriptor: ElementDescriptor) -> str | None:
    return _DEFAULT_RESOLVER.resolve_accessible_name(descriptor)


def role_xpath_predicate(role: str) -> str:
    """XPath test matching elements with ``role``, explicit or implicit."""
    tests = [f'@role="{role}"']
    tests += [f"self::{tag}" for tag, implied in IMPLICIT_ROLES.items() if implied == role]
    tests += [f'self::input[@type="{kind}"]' for kind, implied in INPUT_TYPE_ROLES.items() if implied == role]
    if role == "textbox":
        tests.append("self::input[not(@type)]")
    elif role == "link":
        tests.append("self::a[@href]")
    elif role == "heading":
        tests += [f"self::{tag}" for tag in sorted(HEADING_TAGS)]
    return " or ".join(tests)
