import pytest

from domlocator.dom_extractor import (
    ELEMENT_PAYLOAD_SCRIPT,
    CaptureError,
    PayloadError,
    capture_from_url,
    descriptor_from_payload,
    extract_element_descriptor,
    is_missing_browser_error,
)
from domlocator.locator_generator import generate_locators
from domlocator.selector_path import build_selector_path


def _list_item_payload() -> dict:
    return {
        "tag": "li",
        "attributes": {"class": "dom-agent-hover"},
        "text": "Second item",
        "position": 2,
        "siblingCount": 3,
        "sameTagIndex": 2,
        "sameTagCount": 3,
        "ancestry": [
            {"tag": "ul", "attributes": {"class": "menu"}, "position": 1, "siblingCount": 1},
            {"tag": "body", "attributes": {}},
            {"tag": "html", "attributes": {"lang": "en"}},
        ],
    }


class _FakeElement:
    def __init__(self, payload: object) -> None:
        self._payload = payload
        self.scripts: list[str] = []

    def evaluate(self, script: str) -> object:
        self.scripts.append(script)
        return self._payload


def test_ancestry_payload_builds_full_chain() -> None:
    descriptor = descriptor_from_payload(_list_item_payload())

    assert descriptor.tag_name == "li"
    assert [item.tag_name for item in descriptor.ancestors()] == ["ul", "body", "html"]
    path = build_selector_path(descriptor)
    assert path.css_selector == "html > body > ul.menu > li:nth-child(2)"
    assert path.xpath == "/html[1]/body[1]/ul[1]/li[2]"


def test_label_text_from_payload_feeds_label_locator() -> None:
    payload = {"tag": "input", "attributes": {"type": "text"}, "labelText": "  Full name "}

    bundle = generate_locators(descriptor_from_payload(payload))

    assert bundle.label == "page.getByLabel('Full name')"
    assert bundle.primary == "page.getByRole('textbox', { name: 'Full name' })"


def test_nodes_payload_uses_explicit_arena() -> None:
    payload = {
        "nodes": [
            {"tag": "form", "parent": None},
            {"tag": "label", "attributes": {"for": "pw"}, "text": "Password", "parent": 0},
            {"tag": "input", "attributes": {"type": "password", "name": "pw"}, "parent": 0},
        ],
        "target": 2,
    }

    descriptor = descriptor_from_payload(payload)

    assert descriptor.tag_name == "input"
    assert descriptor.position_in_parent == 2
    assert build_selector_path(descriptor).css_selector == "form > input:nth-child(2)"


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"attributes": {}},
        {"tag": "  "},
        {"tag": "div", "attributes": ["a"]},
        {"tag": "div", "ancestry": {"tag": "body"}},
        {"tag": "div", "ancestry": ["body"]},
        {"nodes": []},
        {"nodes": [{"tag": "div", "parent": 3}]},
        {"nodes": [{"tag": "div"}], "target": 5},
    ],
)
def test_malformed_payloads_raise_payload_error(payload: object) -> None:
    with pytest.raises(PayloadError):
        descriptor_from_payload(payload)


def test_extract_element_descriptor_uses_payload_script() -> None:
    element = _FakeElement(_list_item_payload())

    descriptor = extract_element_descriptor(element)  # type: ignore[arg-type]

    assert element.scripts == [ELEMENT_PAYLOAD_SCRIPT]
    assert descriptor.text_content == "Second item"


def test_extract_element_descriptor_rejects_empty_result() -> None:
    with pytest.raises(CaptureError):
        extract_element_descriptor(_FakeElement(None))  # type: ignore[arg-type]


def test_is_missing_browser_error_matches_common_messages() -> None:
    errors = [
        RuntimeError("Executable doesn't exist at /path/to/chromium/chrome"),
        RuntimeError("Please run the following command to download new browsers: playwright install"),
        RuntimeError("Failed to launch chromium because executable does not exist"),
    ]
    for error in errors:
        assert is_missing_browser_error(error)

    assert not is_missing_browser_error(RuntimeError("net::ERR_NAME_NOT_RESOLVED"))


class _FakePage:
    def __init__(self, element: object) -> None:
        self._element = element
        self.visited: list[str] = []

    def goto(self, url: str, timeout: int) -> None:
        self.visited.append(url)

    def query_selector(self, selector: str) -> object:
        return self._element


class _FakeBrowser:
    def __init__(self, page: _FakePage) -> None:
        self.page = page
        self.closed = False

    def new_page(self) -> _FakePage:
        return self.page

    def close(self) -> None:
        self.closed = True


class _FakeChromium:
    def __init__(self, browser: _FakeBrowser | None = None, error: Exception | None = None) -> None:
        self._browser = browser
        self._error = error

    def launch(self, headless: bool = True) -> _FakeBrowser:
        if self._error is not None:
            raise self._error
        assert self._browser is not None
        return self._browser


class _FakePlaywright:
    def __init__(self, chromium: _FakeChromium) -> None:
        self.chromium = chromium

    def __enter__(self) -> "_FakePlaywright":
        return self

    def __exit__(self, *exc_info: object) -> bool:
        return False


def _patch_playwright(monkeypatch: pytest.MonkeyPatch, chromium: _FakeChromium) -> None:
    monkeypatch.setattr("playwright.sync_api.sync_playwright", lambda: _FakePlaywright(chromium))


def test_capture_from_url_extracts_matched_element(monkeypatch: pytest.MonkeyPatch) -> None:
    browser = _FakeBrowser(_FakePage(_FakeElement(_list_item_payload())))
    _patch_playwright(monkeypatch, _FakeChromium(browser))

    descriptor = capture_from_url("https://example.test", "li")

    assert descriptor.tag_name == "li"
    assert browser.page.visited == ["https://example.test"]
    assert browser.closed


def test_capture_from_url_rejects_unmatched_selector(monkeypatch: pytest.MonkeyPatch) -> None:
    browser = _FakeBrowser(_FakePage(None))
    _patch_playwright(monkeypatch, _FakeChromium(browser))

    with pytest.raises(CaptureError, match="matched no element: #missing"):
        capture_from_url("https://example.test", "#missing")

    assert browser.closed


def test_capture_from_url_reports_missing_browser(monkeypatch: pytest.MonkeyPatch) -> None:
    from playwright.sync_api import Error as PlaywrightError

    error = PlaywrightError("Executable doesn't exist at /ms-playwright/chromium/chrome")
    _patch_playwright(monkeypatch, _FakeChromium(error=error))

    with pytest.raises(CaptureError, match="playwright install chromium") as excinfo:
        capture_from_url("https://example.test", "li")

    assert excinfo.value.__cause__ is error
