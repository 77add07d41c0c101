import argparse
import asyncio
import logging
import os
import sys

from grazer.config import Settings


def _configure_logging(level: str) -> None:
    # stdout belongs to the MCP protocol and to `analyze` output.
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _serve(settings: Settings) -> None:
    import uvicorn

    from grazer.main import app
    from grazer.routers import metrics

    metrics.SETTINGS = settings

    url = f"http://{settings.host}:{settings.port}"
    print(f"🚀 Starting metrics API at {url}")
    print(f"   POST {url}/api/metrics with {{\"path\": ...}}")
    print("   Press Ctrl+C to stop.")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


def _mcp(settings: Settings) -> None:
    from grazer import mcp_server

    mcp_server.SETTINGS = settings
    mcp_server.run_stdio()


def _analyze(settings: Settings, path: str, compact: bool) -> None:
    from grazer.errors import GrazerError
    from grazer.services.analysis import analyze_path
    from grazer.services.filesystem import LocalFileSystem

    target_path = os.path.abspath(path)
    try:
        report = asyncio.run(analyze_path(target_path, LocalFileSystem.from_settings(settings)))
    except (GrazerError, OSError) as e:
        raise SystemExit(f"❌ {e}")

    print(report.model_dump_json(by_alias=True, indent=None if compact else 2))


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grazer",
        description=(
            "Static code metrics (complexity, Halstead, maintainability, "
            "comment density) for files and directory trees."
        ),
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        help=f"Logging level written to stderr (default: {defaults.log_level}).",
    )
    parser.add_argument(
        "--skip-vendored",
        action="store_true",
        default=defaults.skip_vendored,
        help="Skip vendored and build directories such as node_modules and dist.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP metrics API.")
    serve.add_argument(
        "--host",
        default=defaults.host,
        help=f"Host interface to bind the server to (default: {defaults.host}).",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=defaults.port,
        help=f"Port to run the server on (default: {defaults.port}).",
    )

    subparsers.add_parser("mcp", help="Run the MCP tool server on stdio.")

    analyze = subparsers.add_parser("analyze", help="Print the metrics report for a path as JSON.")
    analyze.add_argument("path", help="File or directory to measure.")
    analyze.add_argument(
        "--compact",
        action="store_true",
        help="Print the report on a single line.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the CLI.

    Settings come from GRAZER_* environment variables first, then from the
    command line flags.
    """
    defaults = Settings.from_env()
    args = build_parser(defaults).parse_args(argv)

    settings = defaults.model_copy(
        update={
            "log_level": args.log_level.upper(),
            "skip_vendored": args.skip_vendored,
            "host": getattr(args, "host", defaults.host),
            "port": getattr(args, "port", defaults.port),
        }
    )
    _configure_logging(settings.log_level)

    if args.command == "serve":
        _serve(settings)
    elif args.command == "mcp":
        _mcp(settings)
    else:
        _analyze(settings, args.path, args.compact)


if __name__ == "__main__":
    main()
