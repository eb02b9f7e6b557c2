"""CLI entrypoints for docsite commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, load_playbook
from .errors import CatalogError
from .logging import configure_logging
from .models import Family
from .pipeline import SiteBuild, SiteGenerator

_FAMILY_CHOICES = [family.value for family in Family]


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_playbook_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "playbook",
        nargs="?",
        default=".",
        help="Path to the playbook file or its directory (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsite",
        description="Build and query the content catalog of a documentation site.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write timestamped log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    catalog_parser = subparsers.add_parser(
        "catalog",
        help="Print the catalogued files with their output paths and URLs as JSON.",
    )
    _add_verbose_option(catalog_parser, suppress_default=True)
    _add_playbook_argument(catalog_parser)
    catalog_parser.add_argument(
        "--family",
        choices=_FAMILY_CHOICES,
        help="Only list files of this family.",
    )

    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a resource ID and print the URL of the matching file.",
    )
    _add_verbose_option(resolve_parser, suppress_default=True)
    resolve_parser.add_argument("spec", help="Resource ID, e.g. 1.0@component:module:page.adoc")
    _add_playbook_argument(resolve_parser)
    resolve_parser.add_argument(
        "--context",
        help="Fully qualified page ID whose coordinates fill in what SPEC leaves out.",
    )
    resolve_parser.add_argument(
        "--family",
        choices=_FAMILY_CHOICES,
        default=Family.PAGE.value,
        help="Family to resolve when SPEC names none (defaults to page).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve read-only catalog queries over HTTP (requires the service extra).",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_playbook_argument(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind (default 127.0.0.1).")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default 8000).")

    return parser


def _build_site(playbook_path: str) -> SiteBuild:
    playbook = load_playbook(Path(playbook_path))
    return SiteGenerator(playbook).build()


def _serve(playbook_path: str, host: str, port: int) -> None:  # pragma: no cover - integration path
    try:
        from .service import run_service
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install docsite[service]`."
        ) from exc
    run_service(Path(playbook_path), host=host, port=port)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docsite commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        if args.command == "serve":
            _serve(args.playbook, args.host, args.port)
            return
        site = _build_site(args.playbook)
        if args.command == "catalog":
            print(json.dumps(site.manifest(args.family), indent=2))
            return
        if args.command == "resolve":
            context = None
            if args.context:
                context_page = site.catalog.resolve_page(args.context)
                if context_page is None:
                    parser.exit(1, f"Context page not found: {args.context}\n")
                context = context_page.src
            resolved = site.catalog.resolve_resource(args.spec, context, [args.family], args.family)
            if resolved is None:
                parser.exit(1, f"Unresolved {args.family} reference: {args.spec}\n")
            print(resolved.pub.url if resolved.pub else resolved.path)
            return
    except (CatalogError, ConfigError) as exc:
        parser.exit(1, f"docsite {args.command} failed: {exc}\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except RuntimeError as exc:
        parser.exit(1, f"docsite {args.command} failed: {exc}\n")
    parser.exit(1, "Unknown command\n")  # pragma: no cover - argparse enforces choices


if __name__ == "__main__":
    main(sys.argv[1:])
