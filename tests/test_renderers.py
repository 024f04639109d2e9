import pytest

from domlocator.locator_generator import generate_locators
from domlocator.models import DomTree
from domlocator.renderers import RENDERERS, get_renderer


def test_get_renderer_is_case_insensitive() -> None:
    assert get_renderer(" Playwright ").name == "playwright"
    assert get_renderer("SELENIUM").name == "selenium"
    assert set(RENDERERS) == {"playwright", "playwright-python", "testing-library", "cypress", "selenium"}


def test_unknown_target_lists_known_names() -> None:
    with pytest.raises(ValueError, match="playwright-python"):
        get_renderer("webdriverio")


def test_playwright_python_syntax() -> None:
    renderer = get_renderer("playwright-python")

    assert renderer.role("button", "Don't") == "page.get_by_role('button', name='Don\\'t')"
    assert renderer.role("button", None) == "page.get_by_role('button')"
    assert renderer.test_id("x") == "page.get_by_test_id('x')"
    assert renderer.alt_text("Logo") == "page.get_by_alt_text('Logo')"
    assert renderer.css("#main") == "page.locator('#main')"


def test_testing_library_syntax() -> None:
    renderer = get_renderer("testing-library")

    assert renderer.placeholder("Email") == "screen.getByPlaceholderText('Email')"
    assert renderer.label("Email") == "screen.getByLabelText('Email')"
    assert renderer.css("div > span") == "container.querySelector('div > span')"


def test_cypress_syntax() -> None:
    renderer = get_renderer("cypress")

    assert renderer.test_id("email-input") == "cy.get('[data-testid=\\\"email-input\\\"]')"
    assert renderer.text("Sign in") == "cy.contains('Sign in')"
    assert renderer.css("form > input.field") == "cy.get('form > input.field')"
    assert renderer.role("button", "Save") == "cy.findByRole('button', { name: 'Save' })"
    assert renderer.label("Email") == "cy.findByLabelText('Email')"


def test_selenium_syntax() -> None:
    renderer = get_renderer("selenium")

    assert renderer.css("#main") == "driver.find_element(By.CSS_SELECTOR, '#main')"
    assert renderer.placeholder("Email") == "driver.find_element(By.CSS_SELECTOR, '[placeholder=\\\"Email\\\"]')"
    assert renderer.text("Sign in").startswith("driver.find_element(By.XPATH, ")
    assert renderer.role("link", None) == (
        "driver.find_element(By.XPATH, '//*[@role=\\\"link\\\" or self::a[@href]]')"
    )


def test_selenium_role_covers_implicit_tags() -> None:
    locator = get_renderer("selenium").role("button", "Save")

    assert "self::button" in locator
    assert 'self::input[@type=\\"submit\\"]' in locator
    assert 'normalize-space()=\\"Save\\"' in locator


def test_generate_locators_for_cypress_target() -> None:
    descriptor = DomTree.single("input", {"type": "email", "data-testid": "email-input", "id": "email"})

    bundle = generate_locators(descriptor, target="cypress")

    assert bundle.target == "cypress"
    assert bundle.primary == "cy.get('[data-testid=\\\"email-input\\\"]')"
    assert bundle.css == "cy.get('#email')"


def test_all_renderers_escape_quotes() -> None:
    for renderer in RENDERERS.values():
        assert "\\'" in renderer.title("it's")
        assert '\\"' in renderer.text('say "hi"')
