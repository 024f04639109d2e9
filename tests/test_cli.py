import io
import json
from pathlib import Path

import pytest

from domlocator.__main__ import main


def _write_payload(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "element.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_cli_prints_locators_and_selector_path(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    payload_path = _write_payload(
        tmp_path,
        {"tag": "button", "attributes": {"id": "save", "data-testid": "save-btn"}, "text": "Save"},
    )

    code = main([str(payload_path), "--config", str(tmp_path / "missing.json"), "--log-dir", str(tmp_path)])

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["locators"]["primary"] == "page.getByRole('button', { name: 'Save' })"
    assert output["locators"]["testId"] == "page.getByTestId('save-btn')"
    assert output["selectorPath"] == {"cssSelector": "#save", "xpath": '//*[@id="save"]'}
    assert "analysis" not in output


def test_cli_target_and_analysis_flags(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    payload_path = _write_payload(tmp_path, {"tag": "img", "attributes": {"alt": "Logo"}})

    code = main(
        [
            str(payload_path),
            "--target",
            "playwright-python",
            "--analysis",
            "--config",
            str(tmp_path / "missing.json"),
            "--log-dir",
            str(tmp_path),
        ]
    )

    assert code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["locators"]["primary"] == "page.get_by_alt_text('Logo')"
    assert output["analysis"]["reliability"] == "low"


def test_cli_reads_stdin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps({"tag": "span", "text": "Hello there"})))

    code = main(["-", "--config", str(tmp_path / "missing.json"), "--log-dir", str(tmp_path)])

    assert code == 0
    assert json.loads(capsys.readouterr().out)["locators"]["primary"] == "page.getByText('Hello there')"


@pytest.mark.parametrize("content", ["{not json", json.dumps({"attributes": {}})])
def test_cli_rejects_bad_payloads(tmp_path: Path, content: str, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "element.json"
    path.write_text(content, encoding="utf-8")

    code = main([str(path), "--config", str(tmp_path / "missing.json"), "--log-dir", str(tmp_path)])

    assert code == 2
    assert "error" in capsys.readouterr().err


def test_cli_requires_an_input(tmp_path: Path) -> None:
    assert main(["--config", str(tmp_path / "missing.json"), "--log-dir", str(tmp_path)]) == 2
    assert main(["--url", "https://example.com", "--log-dir", str(tmp_path)]) == 2
