from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

LocatorType = Literal["role", "testId", "placeholder", "text", "label", "altText", "title", "css"]


class AttributeMap(Mapping[str, str]):
    """Ordered, read-only attribute bag. Insertion order is DOM attribute order."""

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None) -> None:
        pairs = items.items() if isinstance(items, Mapping) else (items or ())
        data: dict[str, str] = {}
        for key, value in pairs:
            name = str(key)
            if not name:
                raise ValueError("Attribute names must be non-empty.")
            data[name] = "" if value is None else str(value)
        self._items = data

    def __getitem__(self, key: str) -> str:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"AttributeMap({self._items!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AttributeMap):
            return list(self._items.items()) == list(other._items.items())
        if isinstance(other, Mapping):
            return dict(self._items) == dict(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._items.items()))


@dataclass(frozen=True, slots=True)
class ElementNode:
    index: int
    tag_name: str
    attributes: AttributeMap
    text_content: str = ""
    parent: int | None = None
    label_text: str | None = None
    # Sibling facts reported by a capture that could not ship the real siblings.
    position_hint: int | None = None
    sibling_count_hint: int | None = None
    same_tag_index_hint: int | None = None
    same_tag_count_hint: int | None = None


class DomTreeBuilder:
    def __init__(self) -> None:
        self._nodes: list[ElementNode] = []

    def add(
        self,
        tag_name: str,
        attributes: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        text_content: str = "",
        parent: int | None = None,
        *,
        label_text: str | None = None,
        position_hint: int | None = None,
        sibling_count_hint: int | None = None,
        same_tag_index_hint: int | None = None,
        same_tag_count_hint: int | None = None,
    ) -> int:
        if parent is not None and not 0 <= parent < len(self._nodes):
            raise ValueError(f"Unknown parent index: {parent}")
        index = len(self._nodes)
        self._nodes.append(
            ElementNode(
                index=index,
                tag_name=(tag_name or "").strip().lower(),
                attributes=AttributeMap(attributes),
                text_content=text_content or "",
                parent=parent,
                label_text=label_text,
                position_hint=position_hint,
                sibling_count_hint=sibling_count_hint,
                same_tag_index_hint=same_tag_index_hint,
                same_tag_count_hint=same_tag_count_hint,
            )
        )
        return index

    def build(self) -> DomTree:
        return DomTree(tuple(self._nodes))


@dataclass(frozen=True, slots=True)
class DomTree:
    nodes: tuple[ElementNode, ...]
    _children: dict[int, tuple[int, ...]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        children: dict[int, list[int]] = {}
        for node in self.nodes:
            if node.parent is not None:
                children.setdefault(node.parent, []).append(node.index)
        object.__setattr__(self, "_children", {key: tuple(value) for key, value in children.items()})

    @classmethod
    def single(
        cls,
        tag_name: str,
        attributes: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        text_content: str = "",
    ) -> ElementDescriptor:
        builder = DomTreeBuilder()
        index = builder.add(tag_name, attributes, text_content)
        return builder.build().descriptor(index)

    def node(self, index: int) -> ElementNode:
        return self.nodes[index]

    def children_of(self, index: int) -> tuple[int, ...]:
        return self._children.get(index, ())

    def descriptor(self, index: int) -> ElementDescriptor:
        if not 0 <= index < len(self.nodes):
            raise IndexError(f"No node at index {index}")
        return ElementDescriptor(self, index)

    def find_by_id(self, id_value: str) -> list[int]:
        if not id_value:
            return []
        return [node.index for node in self.nodes if node.attributes.get("id") == id_value]

    def find_by_tag(self, tag_name: str) -> list[int]:
        return [node.index for node in self.nodes if node.tag_name == tag_name]


@dataclass(frozen=True, slots=True)
class ElementDescriptor:
    tree: DomTree
    index: int

    @property
    def node(self) -> ElementNode:
        return self.tree.node(self.index)

    @property
    def tag_name(self) -> str:
        return self.node.tag_name

    @property
    def attributes(self) -> AttributeMap:
        return self.node.attributes

    @property
    def text_content(self) -> str:
        return self.node.text_content

    @property
    def label_text(self) -> str | None:
        return self.node.label_text

    @property
    def id(self) -> str:
        return self.attributes.get("id", "")

    @property
    def class_list(self) -> list[str]:
        seen: set[str] = set()
        classes: list[str] = []
        for item in self.attributes.get("class", "").split():
            if item in seen:
                continue
            seen.add(item)
            classes.append(item)
        return classes

    @property
    def parent(self) -> ElementDescriptor | None:
        parent_index = self.node.parent
        if parent_index is None:
            return None
        return ElementDescriptor(self.tree, parent_index)

    def ancestors(self) -> Iterator[ElementDescriptor]:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def attr(self, key: str) -> str | None:
        raw = self.attributes.get(key)
        if raw is None:
            return None
        value = raw.strip()
        return value or None

    def _siblings(self) -> tuple[int, ...]:
        parent_index = self.node.parent
        if parent_index is None:
            return (self.index,)
        return self.tree.children_of(parent_index)

    @property
    def sibling_count(self) -> int:
        if self.node.sibling_count_hint is not None:
            return self.node.sibling_count_hint
        return len(self._siblings())

    @property
    def position_in_parent(self) -> int:
        if self.node.position_hint is not None:
            return self.node.position_hint
        return self._siblings().index(self.index) + 1

    @property
    def previous_siblings_of_same_tag(self) -> int:
        if self.node.same_tag_index_hint is not None:
            return max(0, self.node.same_tag_index_hint - 1)
        siblings = self._siblings()
        preceding = siblings[: siblings.index(self.index)]
        return sum(1 for index in preceding if self.tree.node(index).tag_name == self.tag_name)

    @property
    def siblings_of_same_tag_total(self) -> int:
        if self.node.same_tag_count_hint is not None:
            return self.node.same_tag_count_hint
        return sum(1 for index in self._siblings() if self.tree.node(index).tag_name == self.tag_name)


@dataclass(frozen=True, slots=True)
class LocatorCandidate:
    type: LocatorType
    locator: str
    description: str
    priority: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "locator": self.locator,
            "description": self.description,
            "priority": self.priority,
        }


@dataclass(frozen=True, slots=True)
class LocatorBundle:
    primary: str
    alternatives: tuple[LocatorCandidate, ...]
    css: str
    role: str | None = None
    test_id: str | None = None
    placeholder: str | None = None
    text: str | None = None
    label: str | None = None
    alt_text: str | None = None
    title: str | None = None
    resolved_role: str | None = None
    accessible_name: str | None = None
    target: str = "playwright"

    def candidate(self, locator_type: LocatorType) -> LocatorCandidate | None:
        return next((item for item in self.alternatives if item.type == locator_type), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary": self.primary,
            "alternatives": [item.to_dict() for item in self.alternatives],
            "role": self.role,
            "testId": self.test_id,
            "placeholder": self.placeholder,
            "text": self.text,
            "label": self.label,
            "altText": self.alt_text,
            "title": self.title,
            "css": self.css,
        }


@dataclass(frozen=True, slots=True)
class SelectorPath:
    css_selector: str
    xpath: str

    def to_dict(self) -> dict[str, str]:
        return {"cssSelector": self.css_selector, "xpath": self.xpath}
