from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Any, Literal

from .models import ElementDescriptor
from .role_resolver import RoleResolver
from .selector_rules import INTERACTIVE_TAGS

Reliability = Literal["high", "medium", "low"]

_ID_MARK = re.compile(r"#")
_QUALIFIER_MARK = re.compile(r"\.|:|\[")
_WORD = re.compile(r"\b[a-z]+\b", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class ElementAnalysis:
    tag: str
    role: str | None
    accessible_name: str | None
    interactive: bool
    reliability: Reliability
    specificity: int
    issues: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "role": self.role,
            "accessibleName": self.accessible_name,
            "interactive": self.interactive,
            "reliability": self.reliability,
            "specificity": self.specificity,
            "issues": list(self.issues),
            "suggestions": list(self.suggestions),
        }


def selector_specificity(selector: str) -> int:
    specificity = len(_ID_MARK.findall(selector)) * 100
    specificity += len(_QUALIFIER_MARK.findall(selector)) * 10
    specificity += len(_WORD.findall(selector))
    return specificity


def is_interactive(descriptor: ElementDescriptor) -> bool:
    return descriptor.tag_name in INTERACTIVE_TAGS


def assess_selector_reliability(descriptor: ElementDescriptor) -> Reliability:
    has_classes = bool(descriptor.class_list)
    if descriptor.id:
        return "high"
    if has_classes and descriptor.attributes.get("name"):
        return "high"
    if has_classes:
        return "medium"
    if descriptor.attributes.get("name") or descriptor.attributes.get("type"):
        return "medium"
    return "low"


def _has_accessible_name(descriptor: ElementDescriptor, resolver: RoleResolver) -> bool:
    return bool(resolver.resolve_accessible_name(descriptor) or descriptor.text_content.strip())


def find_accessibility_issues(descriptor: ElementDescriptor, resolver: RoleResolver | None = None) -> list[str]:
    active = resolver or RoleResolver()
    issues: list[str] = []
    attrs = descriptor.attributes
    if is_interactive(descriptor) and not _has_accessible_name(descriptor, active):
        issues.append("Interactive element lacks accessible name")
    if descriptor.tag_name == "img" and not attrs.get("alt"):
        issues.append("Image missing alt attribute")
    if (
        descriptor.tag_name == "input"
        and attrs.get("type") != "submit"
        and not attrs.get("aria-label")
        and not attrs.get("placeholder")
        and not active.label_text(descriptor)
    ):
        issues.append("Form input lacks label")
    return issues


def suggest_improvements(descriptor: ElementDescriptor, resolver: RoleResolver | None = None) -> list[str]:
    active = resolver or RoleResolver()
    suggestions: list[str] = []
    tag = descriptor.tag_name
    attrs = descriptor.attributes

    if not descriptor.id and tag not in {"div", "span"}:
        suggestions.append("Consider adding an 'id' attribute for better targeting")
    if not descriptor.class_list:
        suggestions.append("Consider adding CSS classes for styling and selection")
    if is_interactive(descriptor) and not _has_accessible_name(descriptor, active):
        suggestions.append("Add 'aria-label' for better accessibility")
    if tag == "input" and not attrs.get("name"):
        suggestions.append("Add 'name' attribute for form handling")
    if tag == "a" and not attrs.get("title"):
        suggestions.append("Consider adding 'title' attribute for better UX")
    if tag == "img" and not attrs.get("alt"):
        suggestions.append("Add 'alt' attribute for accessibility")
    return suggestions


def analyze_element(
    descriptor: ElementDescriptor,
    css_selector: str,
    resolver: RoleResolver | None = None,
) -> ElementAnalysis:
    active = resolver or RoleResolver()
    return ElementAnalysis(
        tag=descriptor.tag_name,
        role=active.resolve_role(descriptor),
        accessible_name=active.resolve_accessible_name(descriptor),
        interactive=is_interactive(descriptor),
        reliability=assess_selector_reliability(descriptor),
        specificity=selector_specificity(css_selector),
        issues=find_accessibility_issues(descriptor, active),
        suggestions=suggest_improvements(descriptor, active),
    )
