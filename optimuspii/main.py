"""Command-line entry point for the OptimusPII engines."""

import argparse
import json
import logging
import sys
from typing import Optional

from .config import Config, load_config, validate_config
from .exceptions import ConfigurationError
from .patterns import detect, highlight, redact_text
from .phishing import PhishingURLDetector

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FLAGGED = 1
EXIT_ERROR = 2


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def _read_text(value: Optional[str]) -> str:
    if value is None or value == "-":
        return sys.stdin.read()
    return value


def cmd_url(config: Config, args: argparse.Namespace) -> int:
    detector_config = config.detector_config()
    if args.sensitivity is not None:
        detector_config = detector_config.with_sensitivity(args.sensitivity)
    if args.threshold is not None:
        detector_config = detector_config.with_threshold(args.threshold)

    result = PhishingURLDetector(detector_config).analyze(args.url)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    elif result.error:
        print(f"ERROR  {args.url}: {result.error}")
    else:
        verdict = "PHISHING" if result.is_phishing else "OK"
        print(f"{verdict}  {args.url}")
        print(f"  confidence: {result.confidence}%  score: {result.phishing_score:.3f}"
              f"  threshold: {detector_config.threshold:.2f}")
        for reason in result.reasons:
            print(f"  - {reason}")

    if result.error:
        return EXIT_ERROR
    return EXIT_FLAGGED if result.is_phishing else EXIT_OK


def cmd_scan(config: Config, args: argparse.Namespace) -> int:
    text = _read_text(args.text)
    result = detect(text, config.patterns)

    if args.json:
        print(json.dumps(
            {
                "matches": result.matches_by_pattern,
                "spans": [
                    {"start": s.start, "end": s.end, "pattern": s.pattern_name, "text": s.matched_text}
                    for s in sorted(result.spans, key=lambda s: s.start)
                ],
                "errors": [{"pattern": e.pattern_name, "message": e.message} for e in result.errors],
            },
            indent=2,
            ensure_ascii=False,
        ))
    elif not result.has_matches:
        print("No sensitive information found")
    else:
        for name, found in result.matches_by_pattern.items():
            print(f"{name}: {len(found)}")
            for match in found:
                print(f"  {match}")
        if args.highlight:
            rendered = "".join(
                f"[{s.pattern_name}: {s.text}]" if s.is_match else s.text
                for s in highlight(text, result.compiled)
            )
            print()
            print(rendered)

    for error in result.errors:
        logger.warning("Pattern %s skipped: %s", error.pattern_name, error.message)

    if args.fail_on_match and result.has_matches:
        return EXIT_FLAGGED
    return EXIT_OK


def cmd_redact(config: Config, args: argparse.Namespace) -> int:
    text = _read_text(args.text)
    redacted, result = redact_text(text, config.patterns)
    sys.stdout.write(redacted)
    if not redacted.endswith("\n"):
        sys.stdout.write("\n")
    if args.fail_on_match and result.has_matches:
        return EXIT_FLAGGED
    return EXIT_OK


def cmd_validate(config: Config, args: argparse.Namespace) -> int:
    errors = validate_config(config)
    for err in errors:
        print(err)
    if not errors:
        print(f"Configuration OK (heuristics v{config.heuristics_version}, {len(config.patterns)} patterns)")
    return EXIT_ERROR if errors else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="optimuspii",
        description="Detect PII in text and score URLs for phishing.",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    url_parser = subparsers.add_parser("url", help="Score a URL for phishing.")
    url_parser.add_argument("url")
    url_parser.add_argument("--sensitivity", type=float, help="0-100, higher flags more URLs.")
    url_parser.add_argument("--threshold", type=float, help="Explicit classification threshold (0-1).")
    url_parser.add_argument("--json", action="store_true", help="Print the full result as JSON.")
    url_parser.set_defaults(handler=cmd_url)

    scan_parser = subparsers.add_parser("scan", help="List PII pattern matches in text.")
    scan_parser.add_argument("text", nargs="?", help="Text to scan, or - for stdin (default).")
    scan_parser.add_argument("--json", action="store_true", help="Print matches as JSON.")
    scan_parser.add_argument("--highlight", action="store_true", help="Also print the text with matches tagged.")
    scan_parser.add_argument("--fail-on-match", action="store_true", help="Exit 1 when anything matches.")
    scan_parser.set_defaults(handler=cmd_scan)

    redact_parser = subparsers.add_parser("redact", help="Print text with PII replaced by sample values.")
    redact_parser.add_argument("text", nargs="?", help="Text to redact, or - for stdin (default).")
    redact_parser.add_argument("--fail-on-match", action="store_true", help="Exit 1 when anything was redacted.")
    redact_parser.set_defaults(handler=cmd_redact)

    validate_parser = subparsers.add_parser("validate", help="Check configuration and patterns.")
    validate_parser.set_defaults(handler=cmd_validate)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
    except ConfigurationError as exc:
        _configure_logging(args.log_level or "INFO")
        logger.error("%s", exc)
        return EXIT_ERROR

    _configure_logging(args.log_level or config.log_level)
    return args.handler(config, args)


if __name__ == "__main__":
    sys.exit(main())
