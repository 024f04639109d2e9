from __future__ import annotations

from .role_resolver import role_xpath_predicate
from .selector_rules import escape_locator_string


def _quoted(value: str) -> str:
    return f"'{escape_locator_string(value)}'"


class LocatorRenderer:
    """Renders strategy values into one automation framework's query syntax."""

    name = ""

    def role(self, role: str, name: str | None) -> str:
        raise NotImplementedError

    def test_id(self, value: str) -> str:
        raise NotImplementedError

    def placeholder(self, value: str) -> str:
        raise NotImplementedError

    def text(self, value: str) -> str:
        raise NotImplementedError

    def label(self, value: str) -> str:
        raise NotImplementedError

    def alt_text(self, value: str) -> str:
        raise NotImplementedError

    def title(self, value: str) -> str:
        raise NotImplementedError

    def css(self, selector: str) -> str:
        raise NotImplementedError


class PlaywrightRenderer(LocatorRenderer):
    name = "playwright"

    def role(self, role: str, name: str | None) -> str:
        if name:
            return f"page.getByRole({_quoted(role)}, {{ name: {_quoted(name)} }})"
        return f"page.getByRole({_quoted(role)})"

    def test_id(self, value: str) -> str:
        return f"page.getByTestId({_quoted(value)})"

    def placeholder(self, value: str) -> str:
        return f"page.getByPlaceholder({_quoted(value)})"

    def text(self, value: str) -> str:
        return f"page.getByText({_quoted(value)})"

    def label(self, value: str) -> str:
        return f"page.getByLabel({_quoted(value)})"

    def alt_text(self, value: str) -> str:
        return f"page.getByAltText({_quoted(value)})"

    def title(self, value: str) -> str:
        return f"page.getByTitle({_quoted(value)})"

    def css(self, selector: str) -> str:
        return f"page.locator({_quoted(selector)})"


class PlaywrightPythonRenderer(LocatorRenderer):
    name = "playwright-python"

    def role(self, role: str, name: str | None) -> str:
        if name:
            return f"page.get_by_role({_quoted(role)}, name={_quoted(name)})"
        return f"page.get_by_role({_quoted(role)})"

    def test_id(self, value: str) -> str:
        return f"page.get_by_test_id({_quoted(value)})"

    def placeholder(self, value: str) -> str:
        return f"page.get_by_placeholder({_quoted(value)})"

    def text(self, value: str) -> str:
        return f"page.get_by_text({_quoted(value)})"

    def label(self, value: str) -> str:
        return f"page.get_by_label({_quoted(value)})"

    def alt_text(self, value: str) -> str:
        return f"page.get_by_alt_text({_quoted(value)})"

    def title(self, value: str) -> str:
        return f"page.get_by_title({_quoted(value)})"

    def css(self, selector: str) -> str:
        return f"page.locator({_quoted(selector)})"


class TestingLibraryRenderer(LocatorRenderer):
    name = "testing-library"

    def role(self, role: str, name: str | None) -> str:
        if name:
            return f"screen.getByRole({_quoted(role)}, {{ name: {_quoted(name)} }})"
        return f"screen.getByRole({_quoted(role)})"

    def test_id(self, value: str) -> str:
        return f"screen.getByTestId({_quoted(value)})"

    def placeholder(self, value: str) -> str:
        return f"screen.getByPlaceholderText({_quoted(value)})"

    def text(self, value: str) -> str:
        return f"screen.getByText({_quoted(value)})"

    def label(self, value: str) -> str:
        return f"screen.getByLabelText({_quoted(value)})"

    def alt_text(self, value: str) -> str:
        return f"screen.getByAltText({_quoted(value)})"

    def title(self, value: str) -> str:
        return f"screen.getByTitle({_quoted(value)})"

    def css(self, selector: str) -> str:
        return f"container.querySelector({_quoted(selector)})"


class CypressRenderer(LocatorRenderer):
    """Cypress commands; role and label queries need ``@testing-library/cypress``."""

    name = "cypress"

    def role(self, role: str, name: str | None) -> str:
        if name:
            return f"cy.findByRole({_quoted(role)}, {{ name: {_quoted(name)} }})"
        return f"cy.findByRole({_quoted(role)})"

    def test_id(self, value: str) -> str:
        return self.css(f'[data-testid="{value}"]')

    def placeholder(self, value: str) -> str:
        return self.css(f'[placeholder="{value}"]')

    def text(self, value: str) -> str:
        return f"cy.contains({_quoted(value)})"

    def label(self, value: str) -> str:
        return f"cy.findByLabelText({_quoted(value)})"

    def alt_text(self, value: str) -> str:
        return self.css(f'[alt="{value}"]')

    def title(self, value: str) -> str:
        return self.css(f'[title="{value}"]')

    def css(self, selector: str) -> str:
        return f"cy.get({_quoted(selector)})"


class SeleniumRenderer(LocatorRenderer):
    """Python Selenium ``find_element`` calls; ARIA queries become XPath."""

    name = "selenium"

    def _find(self, by: str, value: str) -> str:
        return f"driver.find_element(By.{by}, {_quoted(value)})"

    def role(self, role: str, name: str | None) -> str:
        xpath = f"//*[{role_xpath_predicate(role)}]"
        if name:
            xpath += (
                f'[@aria-label="{name}" or normalize-space()="{name}"'
                f' or @id=//label[normalize-space()="{name}"]/@for]'
            )
        return self._find("XPATH", xpath)

    def test_id(self, value: str) -> str:
        return self.css(f'[data-testid="{value}"]')

    def placeholder(self, value: str) -> str:
        return self.css(f'[placeholder="{value}"]')

    def text(self, value: str) -> str:
        return self._find("XPATH", f'//*[normalize-space(text())="{value}"]')

    def label(self, value: str) -> str:
        return self._find(
            "XPATH",
            f'//*[@id=//label[normalize-space()="{value}"]/@for]'
            f' | //label[normalize-space()="{value}"]//*[self::input or self::select or self::textarea]',
        )

    def alt_text(self, value: str) -> str:
        return self.css(f'[alt="{value}"]')

    def title(self, value: str) -> str:
        return self.css(f'[title="{value}"]')

    def css(self, selector: str) -> str:
        return self._find("CSS_SELECTOR", selector)


RENDERERS: dict[str, LocatorRenderer] = {
    renderer.name: renderer
    for renderer in (
        PlaywrightRenderer(),
        PlaywrightPythonRenderer(),
        TestingLibraryRenderer(),
        CypressRenderer(),
        SeleniumRenderer(),
    )
}


def get_renderer(target: str) -> LocatorRenderer:
    key = (target or "").strip().lower()
    renderer = RENDERERS.get(key)
    if renderer is None:
        known = ", ".join(sorted(RENDERERS))
        raise ValueError(f"Unknown locator target '{target}'. Expected one of: {known}")
    return renderer
