from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable

from .models import ElementDescriptor, LocatorBundle, LocatorCandidate, LocatorType
from .renderers import LocatorRenderer, get_renderer
from .role_resolver import RoleResolver
from .selector_path import SelectorPathBuilder
from .settings import EngineSettings

LOGGER = logging.getLogger("domlocator.locators")


@dataclass(frozen=True, slots=True)
class StrategySpec:
    locator_type: LocatorType
    priority: int
    description: str


STRATEGIES: dict[LocatorType, StrategySpec] = {
    spec.locator_type: spec
    for spec in (
        StrategySpec("role", 1, "By ARIA role (most accessible)"),
        StrategySpec("testId", 2, "By test ID (most stable)"),
        StrategySpec("placeholder", 3, "By placeholder text"),
        StrategySpec("text", 4, "By visible text"),
        StrategySpec("label", 5, "By associated label"),
        StrategySpec("altText", 6, "By alt text"),
        StrategySpec("title", 7, "By title attribute"),
        StrategySpec("css", 8, "By CSS selector"),
    )
}

PRIMARY_ORDER: tuple[LocatorType, ...] = (
    "role",
    "testId",
    "placeholder",
    "text",
    "label",
    "altText",
    "title",
    "css",
)


class CandidateFactory:
    def __init__(
        self,
        descriptor: ElementDescriptor,
        renderer: LocatorRenderer,
        resolver: RoleResolver,
        path_builder: SelectorPathBuilder,
        settings: EngineSettings,
    ) -> None:
        self.descriptor = descriptor
        self.renderer = renderer
        self.resolver = resolver
        self.path_builder = path_builder
        self.settings = settings
        self.resolved_role: str | None = None
        self.accessible_name: str | None = None
        self._candidates: list[LocatorCandidate] = []

    def generate(self) -> list[LocatorCandidate]:
        steps: tuple[tuple[LocatorType, Callable[[], str | None]], ...] = (
            ("role", self._role_locator),
            ("testId", self._test_id_locator),
            ("placeholder", self._placeholder_locator),
            ("text", self._text_locator),
            ("label", self._label_locator),
            ("altText", self._alt_text_locator),
            ("title", self._title_locator),
            ("css", self._css_locator),
        )
        for locator_type, build in steps:
            locator = build()
            if not locator:
                LOGGER.debug("Strategy %s skipped for <%s>", locator_type, self.descriptor.tag_name)
                continue
            spec = STRATEGIES[locator_type]
            self._candidates.append(
                LocatorCandidate(
                    type=locator_type,
                    locator=locator,
                    description=spec.description,
                    priority=spec.priority,
                )
            )
        return list(self._candidates)

    def _role_locator(self) -> str | None:
        role = self.resolver.resolve_role(self.descriptor)
        self.resolved_role = role
        if not role:
            return None
        self.accessible_name = self.resolver.resolve_accessible_name(self.descriptor)
        return self.renderer.role(role, self.accessible_name)

    def _test_id_locator(self) -> str | None:
        for attr in self.settings.test_id_attributes:
            value = self.descriptor.attr(attr)
            if value:
                return self.renderer.test_id(value)
        return None

    def _placeholder_locator(self) -> str | None:
        if self.descriptor.tag_name not in {"input", "textarea"}:
            return None
        placeholder = self.descriptor.attr("placeholder")
        if not placeholder:
            return None
        return self.renderer.placeholder(placeholder)

    def _text_locator(self) -> str | None:
        text = (self.descriptor.text_content or "").strip()
        if not text:
            return None
        if len(text) < self.settings.text_min_length or len(text) > self.settings.text_max_length:
            return None
        return self.renderer.text(text)

    def _label_locator(self) -> str | None:
        label = self.resolver.label_text(self.descriptor)
        if not label:
            return None
        return self.renderer.label(label)

    def _alt_text_locator(self) -> str | None:
        if self.descriptor.tag_name != "img":
            return None
        alt = self.descriptor.attr("alt")
        if not alt:
            return None
        return self.renderer.alt_text(alt)

    def _title_locator(self) -> str | None:
        title = self.descriptor.attr("title")
        if not title:
            return None
        return self.renderer.title(title)

    def _css_locator(self) -> str:
        selector = self.path_builder.css_selector(self.descriptor)
        if not selector:
            # Degenerate input (empty tag name); keep the fallback non-empty.
            selector = "*"
        return self.renderer.css(selector)


def rank_candidates(candidates: list[LocatorCandidate]) -> list[LocatorCandidate]:
    return sorted(candidates, key=lambda item: item.priority)


def select_primary(candidates: list[LocatorCandidate], *, role_is_named: bool = True) -> str:
    by_type = {item.type: item.locator for item in candidates}
    order = PRIMARY_ORDER
    if not role_is_named:
        # A bare role matches every element with that role; prefer any other signal.
        # An unlabelled input[type=email] with a test id must lead with the test id.
        order = (*PRIMARY_ORDER[1:-1], "role", "css")
    for locator_type in order:
        locator = by_type.get(locator_type)
        if locator:
            return locator
    return ""


class LocatorGenerator:
    """Produces a ranked :class:`LocatorBundle` for one element."""

    def __init__(
        self,
        renderer: LocatorRenderer | None = None,
        settings: EngineSettings | None = None,
        resolver: RoleResolver | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.renderer = renderer or get_renderer(self.settings.target)
        self.resolver = resolver or RoleResolver()
        self.path_builder = SelectorPathBuilder(self.settings)

    def generate(self, descriptor: ElementDescriptor) -> LocatorBundle:
        factory = CandidateFactory(
            descriptor=descriptor,
            renderer=self.renderer,
            resolver=self.resolver,
            path_builder=self.path_builder,
            settings=self.settings,
        )
        candidates = factory.generate()
        ranked = rank_candidates(candidates)
        by_type = {item.type: item.locator for item in ranked}

        bundle = LocatorBundle(
            primary=select_primary(ranked, role_is_named=factory.accessible_name is not None),
            alternatives=tuple(ranked),
            css=by_type["css"],
            role=by_type.get("role"),
            test_id=by_type.get("testId"),
            placeholder=by_type.get("placeholder"),
            text=by_type.get("text"),
            label=by_type.get("label"),
            alt_text=by_type.get("altText"),
            title=by_type.get("title"),
            resolved_role=factory.resolved_role,
            accessible_name=factory.accessible_name,
            target=self.renderer.name,
        )
        LOGGER.debug(
            "Generated %d locators for <%s>; primary=%s",
            len(ranked),
            descriptor.tag_name,
            bundle.primary,
        )
        return bundle


def generate_locators(
    descriptor: ElementDescriptor,
    target: str | None = None,
    settings: EngineSettings | None = None,
) -> LocatorBundle:
    active = settings or EngineSettings()
    renderer = get_renderer(target or active.target)
    return LocatorGenerator(renderer=renderer, settings=active).generate(descriptor)
