from __future__ import annotations

import logging

from .models import ElementDescriptor, SelectorPath
from .selector_rules import usable_classes
from .settings import EngineSettings

LOGGER = logging.getLogger("domlocator.paths")


class SelectorPathBuilder:
    """Builds a short CSS path and an absolute XPath by walking the ancestor chain."""

    def __init__(self, settings: EngineSettings | None = None) -> None:
        self.settings = settings or EngineSettings()

    def build(self, descriptor: ElementDescriptor) -> SelectorPath:
        return SelectorPath(css_selector=self.css_selector(descriptor), xpath=self.xpath(descriptor))

    def css_selector(self, descriptor: ElementDescriptor) -> str:
        if self._id_short_circuit(descriptor):
            return f"#{descriptor.id}"

        parts: list[str] = []
        current: ElementDescriptor | None = descriptor
        while current is not None and len(parts) < max(1, self.settings.css_max_depth):
            parts.insert(0, self._css_token(current))
            current = current.parent
        return " > ".join(parts)

    def xpath(self, descriptor: ElementDescriptor) -> str:
        if self._id_short_circuit(descriptor):
            return f'//*[@id="{descriptor.id}"]'

        parts: list[str] = []
        current: ElementDescriptor | None = descriptor
        while current is not None:
            parts.insert(0, f"{current.tag_name}[{current.previous_siblings_of_same_tag + 1}]")
            current = current.parent
        return "/" + "/".join(parts)

    def _css_token(self, descriptor: ElementDescriptor) -> str:
        token = descriptor.tag_name
        classes = usable_classes(
            descriptor.class_list,
            limit=self.settings.css_max_classes,
            prefix=self.settings.excluded_class_prefix,
        )
        if classes:
            return token + "." + ".".join(classes)
        if descriptor.sibling_count > 1:
            return f"{token}:nth-child({descriptor.position_in_parent})"
        return token

    def _id_short_circuit(self, descriptor: ElementDescriptor) -> bool:
        element_id = descriptor.id
        if not element_id:
            return False
        if not self.settings.verify_unique_ids:
            return True
        matches = descriptor.tree.find_by_id(element_id)
        if len(matches) > 1:
            LOGGER.debug("id %r shared by %d nodes; using structural path", element_id, len(matches))
            return False
        return True


def build_selector_path(descriptor: ElementDescriptor, settings: EngineSettings | None = None) -> SelectorPath:
    return SelectorPathBuilder(settings).build(descriptor)
