from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from .config import configure
from .runtime_checks import ensure_supported_python, is_missing_browser_error, looks_like_url, missing_browser_message

logger = logging.getLogger("simmer.cli")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="simmer",
        description="Print a unique CSS selector for an element of an HTML document.",
    )
    parser.add_argument("source", help="HTML file, or a URL when --browser is given")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--css", help="CSS selector locating the target (first match is used)")
    target.add_argument("--xpath", help="XPath expression locating the target (first match is used)")
    parser.add_argument("--depth", type=int, help="ancestor levels considered above the target")
    parser.add_argument("--threshold", type=float, help="specificity needed before verifying")
    parser.add_argument("--max-length", type=int, help="longest selector accepted")
    parser.add_argument("--browser", action="store_true", help="load the source in headless Chromium via Playwright")
    parser.add_argument("--verbose", action="store_true", help="log strategy steps and verification attempts")
    return parser.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    root = logging.getLogger("simmer")
    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _config_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.depth is not None:
        overrides["depth"] = args.depth
    if args.threshold is not None:
        overrides["specificity_threshold"] = args.threshold
    if args.max_length is not None:
        overrides["selector_max_length"] = args.max_length
    return overrides


def _report(result: str | bool) -> int:
    if not result:
        print("No unique selector found.", file=sys.stderr)
        return 1
    print(result)
    return 0


def _run_file(args: argparse.Namespace, overrides: dict[str, Any]) -> int:
    from lxml import html
    from lxml.cssselect import CSSSelector

    from .synthesizer import create_simmer

    path = Path(args.source)
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 1

    document = html.document_fromstring(path.read_bytes())
    if args.xpath:
        matches = [item for item in document.xpath(args.xpath) if isinstance(getattr(item, "tag", None), str)]
    else:
        matches = CSSSelector(args.css, translator="html")(document)
    if not matches:
        print("Target element not found.", file=sys.stderr)
        return 1

    simmer = create_simmer(document, overrides)
    return _report(simmer(matches[0]))


def _run_browser(args: argparse.Namespace, overrides: dict[str, Any]) -> int:
    from playwright.sync_api import Error as PlaywrightError
    from playwright.sync_api import sync_playwright

    from .synthesizer import create_simmer

    url = args.source if looks_like_url(args.source) else Path(args.source).resolve().as_uri()
    locator = f"xpath={args.xpath}" if args.xpath else args.css

    with sync_playwright() as playwright:
        try:
            browser = playwright.chromium.launch(headless=True)
        except PlaywrightError as exc:
            if is_missing_browser_error(exc):
                raise SystemExit(missing_browser_message(exc)) from exc
            raise
        try:
            page = browser.new_page()
            logger.info("Loading %s", url)
            page.goto(url)
            handle = page.query_selector(locator)
            if handle is None:
                print("Target element not found.", file=sys.stderr)
                return 1
            simmer = create_simmer(page, overrides)
            return _report(simmer(handle))
        finally:
            browser.close()


def main(argv: Sequence[str] | None = None) -> int:
    ensure_supported_python()
    args = _parse_args(argv)
    _configure_logging(args.verbose)
    overrides = _config_overrides(args)
    try:
        configure(overrides)
    except ValueError as exc:
        print(f"Invalid option: {exc}", file=sys.stderr)
        return 2
    if args.browser:
        return _run_browser(args, overrides)
    return _run_file(args, overrides)


if __name__ == "__main__":
    raise SystemExit(main())
