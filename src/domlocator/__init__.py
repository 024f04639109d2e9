"""Locator and selector generation for single DOM elements."""

from __future__ import annotations

from .locator_generator import LocatorGenerator, generate_locators
from .models import (
    AttributeMap,
    DomTree,
    DomTreeBuilder,
    ElementDescriptor,
    LocatorBundle,
    LocatorCandidate,
    SelectorPath,
)
from .role_resolver import RoleResolver
from .selector_path import SelectorPathBuilder, build_selector_path
from .settings import EngineSettings

__version__ = "0.1.0"

__all__ = [
    "AttributeMap",
    "DomTree",
    "DomTreeBuilder",
    "ElementDescriptor",
    "EngineSettings",
    "LocatorBundle",
    "LocatorCandidate",
    "LocatorGenerator",
    "RoleResolver",
    "SelectorPath",
    "SelectorPathBuilder",
    "build_selector_path",
    "generate_locators",
]
