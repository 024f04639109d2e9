from __future__ import annotations

import argparse
from dataclasses import replace
import json
from pathlib import Path
import sys
from typing import Any, Sequence

from .dom_extractor import CaptureError, PayloadError, capture_from_url, descriptor_from_payload
from .element_analysis import analyze_element
from .locator_generator import LocatorGenerator
from .log import build_logger
from .models import ElementDescriptor
from .renderers import RENDERERS, get_renderer
from .selector_path import SelectorPathBuilder
from .settings import load_settings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="domlocator",
        description="Generate ranked locators, a CSS path and an XPath for one DOM element.",
    )
    parser.add_argument("payload", nargs="?", help="Element payload JSON file, or '-' for stdin.")
    parser.add_argument("--url", help="Capture the element from a live page instead of a payload.")
    parser.add_argument("--selector", help="CSS selector of the element to capture (with --url).")
    parser.add_argument("--target", choices=sorted(RENDERERS), help="Locator syntax to emit.")
    parser.add_argument("--config", type=Path, help="Settings file (default ~/.domlocator/config.json).")
    parser.add_argument("--log-dir", type=Path, help="Directory for engine.log.")
    parser.add_argument("--analysis", action="store_true", help="Include element analysis in the output.")
    parser.add_argument("--headed", action="store_true", help="Show the browser during live capture.")
    return parser


def _read_payload(source: str) -> Any:
    if source == "-":
        raw = sys.stdin.read()
    else:
        try:
            raw = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise PayloadError(f"Could not read payload file: {exc}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PayloadError(f"Payload is not valid JSON: {exc}") from exc


def _resolve_descriptor(args: argparse.Namespace) -> ElementDescriptor:
    if args.url:
        if not args.selector:
            raise PayloadError("--selector is required with --url.")
        return capture_from_url(args.url, args.selector, headless=not args.headed)
    if not args.payload:
        raise PayloadError("Provide a payload file, '-' for stdin, or --url with --selector.")
    return descriptor_from_payload(_read_payload(args.payload))


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logger = build_logger(log_dir=args.log_dir)

    settings = load_settings(args.config)
    if args.target:
        settings = replace(settings, target=args.target)

    try:
        renderer = get_renderer(settings.target)
        descriptor = _resolve_descriptor(args)
    except (PayloadError, CaptureError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"[domlocator] error: {exc}", file=sys.stderr)
        return 2

    bundle = LocatorGenerator(renderer=renderer, settings=settings).generate(descriptor)
    path = SelectorPathBuilder(settings).build(descriptor)
    logger.info("Generated %d locators for <%s>", len(bundle.alternatives), descriptor.tag_name)

    output: dict[str, Any] = {"locators": bundle.to_dict(), "selectorPath": path.to_dict()}
    if args.analysis:
        output["analysis"] = analyze_element(descriptor, path.css_selector).to_dict()
    print(json.dumps(output, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
