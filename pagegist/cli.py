from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .config import PagegistConfig, load_config
from .extract import ExtractedContent, FetchError, extract, fetch_html
from .llm import GeminiClient, Summarizer, SummaryError
from .llm.models import merge_preferences


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagegist",
        description="Extract readable text from web pages and summarize it with Gemini.",
    )
    parser.add_argument(
        "--version", action="store_true", help="Print version and exit"
    )
    parser.add_argument("--config", type=str, default=None, help="Path to a TOML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log model selection details")

    subparsers = parser.add_subparsers(dest="command")

    def add_source_args(p: argparse.ArgumentParser) -> None:
        src = p.add_mutually_exclusive_group()
        src.add_argument("--url", type=str, default=None, help="Page URL to fetch")
        src.add_argument("--html", type=str, default=None, help="Path to a saved HTML file")

    # extract
    ex_p = subparsers.add_parser(
        "extract",
        help="Print the readable text of a page",
        description=(
            "Strip scripts, navigation, ads and hidden elements from a page and\n"
            "print the remaining text with whitespace collapsed."
        ),
    )
    add_source_args(ex_p)
    ex_p.add_argument("--out", type=str, default=None, help="Write text to this path")

    # summarize
    sum_p = subparsers.add_parser(
        "summarize",
        help="Extract a page and summarize it",
        description=(
            "Extract a page, then ask Gemini for a structured Markdown summary.\n"
            "Models are tried in preference order; if none is available the\n"
            "models enabled for your key are discovered automatically."
        ),
    )
    add_source_args(sum_p)
    sum_p.add_argument(
        "--model",
        action="append",
        default=None,
        help="Model to try before the configured list (repeatable)",
    )
    sum_p.add_argument("--out", type=str, default=None, help="Write the summary to this path")
    sum_p.add_argument(
        "--save",
        action="store_true",
        help="Also save summary + original text as summary-<timestamp>.txt",
    )
    sum_p.add_argument("--save-dir", type=str, default=None, help="Directory for --save files")
    sum_p.add_argument("--page-out", type=str, default=None, help="Write an HTML summary page")

    # models
    models_p = subparsers.add_parser("models", help="List model names")
    models_p.add_argument(
        "--discover",
        action="store_true",
        help="Also ask the API which models your key can use",
    )

    return parser


def get_summarizer(cfg: PagegistConfig, models: Optional[Sequence[str]] = None) -> Summarizer:
    client = GeminiClient(base_url=cfg.base_url, timeout=cfg.timeout)
    return Summarizer(
        client,
        models=merge_preferences(models, cfg.models),
        max_chars=cfg.max_chars,
    )


def configure_logging(level: str, verbose: bool = False) -> None:
    resolved = logging.INFO if verbose else getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s | %(name)-24s | %(levelname)-7s | %(message)s",
        stream=sys.stderr,
    )


def _load_page(cmd_label: str, args: argparse.Namespace, cfg: PagegistConfig) -> tuple[ExtractedContent | None, int]:
    """Fetch or read the page named on the command line and extract it.

    Returns (content, exit_code). content is None when nothing was loaded.
    """
    if args.html:
        try:
            html = Path(args.html).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"[pagegist] {cmd_label}: failed to read HTML: {e}")
            return None, 2
        return extract(html, url=Path(args.html).resolve().as_uri()), 0
    if args.url:
        try:
            html = fetch_html(args.url, timeout=cfg.timeout)
        except FetchError as e:
            print(f"[pagegist] {cmd_label}: {e}")
            return None, 2
        return extract(html, url=args.url), 0
    print(f"[pagegist] {cmd_label}: provide --url or --html (no-op)")
    return None, 0


def _write(cmd_label: str, path: str | Path, text: str, what: str) -> bool:
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as e:
        print(f"[pagegist] {cmd_label}: failed to write {what}: {e}")
        return False
    print(f"[pagegist] {what} written → {path}")
    return True


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    # Parse args, but convert argparse-triggered exits (e.g., --help) into return codes
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    if args.version:
        from . import __version__

        print(__version__)
        return 0

    if not args.command:
        parser.print_help()
        return 0

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"[pagegist] failed to load config: {e}")
        return 2
    configure_logging(cfg.log_level, args.verbose)

    if args.command == "extract":
        content, code = _load_page("extract", args, cfg)
        if content is None:
            return code
        if args.out:
            return 0 if _write("extract", args.out, content.text, "text") else 2
        print(content.text)
        return 0

    if args.command == "summarize":
        # Check the credential before touching the network
        if not cfg.api_key:
            print(
                "[pagegist] summarize: missing API key. "
                "Set PAGEGIST_API_KEY in your environment or api_key in your config."
            )
            return 2
        content, code = _load_page("summarize", args, cfg)
        if content is None:
            return code
        if not content.text:
            print("[pagegist] summarize: could not extract content from page.")
            return 2

        with get_summarizer(cfg, args.model) as summarizer:
            try:
                summary = summarizer.summarize(content.text, cfg.api_key)
            except SummaryError as e:
                print(f"[pagegist] summarize: {e}")
                return 2

        now = datetime.now()
        if args.out:
            if not _write("summarize", args.out, summary, "summary"):
                return 2
        else:
            print(summary)
        if args.save:
            from .render import format_saved_summary, summary_filename

            save_dir = Path(args.save_dir or cfg.save_dir or ".")
            try:
                save_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                print(f"[pagegist] summarize: failed to create {save_dir}: {e}")
                return 2
            saved = format_saved_summary(content.url, content.text, summary, now)
            if not _write("summarize", save_dir / summary_filename(now), saved, "saved summary"):
                return 2
        if args.page_out:
            from .render import render_summary_page

            page = render_summary_page(content.title, content.url, content.text, summary, now)
            if not _write("summarize", args.page_out, page, "summary page"):
                return 2
        return 0

    if args.command == "models":
        print("Preferred models:")
        for m in cfg.models:
            print(f" - {m}")
        if not args.discover:
            return 0
        if not cfg.api_key:
            print("[pagegist] models: missing API key; cannot discover models. Set PAGEGIST_API_KEY.")
            return 2
        with get_summarizer(cfg) as summarizer:
            available = summarizer.discover_models(cfg.api_key)
        print("\nAvailable for your key:")
        if not available:
            print(" (none found)")
        for m in available:
            print(f" - {m}")
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
