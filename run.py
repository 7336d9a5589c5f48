"""
project: Hallway Planner
module: run.py
License: MIT

Hallway Planner CLI entry point.

Provides subcommands for generating a single floor plan as JSON and for
running the HTTP API server. Accepts configuration via flags and environment
variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
try:
    _COLOR_ENABLED = sys.stderr.isatty()
except (AttributeError, ValueError):  # pragma: no cover - environment dependent
    _COLOR_ENABLED = False

EXIT_STRICT_FAILURE = 2


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def _global_flags_end(argv: list[str]) -> int:
    """Index of the first argument that is not a global flag or its value."""
    pos = 0
    while pos < len(argv):
        arg = argv[pos]
        if arg == "--env-file":
            pos += 2
        elif arg.startswith("--env-file="):
            pos += 1
        else:
            break
    return min(pos, len(argv))


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Hallway Planner

    Generate deterministic procedural floor plans (hallways, rooms, doors,
    windows and wall segments) as JSON, or serve them over HTTP. Generation
    options may be given as flags; the same seed and options always yield
    the same plan.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                      Bind address for the web server (default: 0.0.0.0)
          PORT                      Port for the web server (default: 5000)
          FLOORPLAN_LOG_LEVEL       debug | info | warn | error (default: info)
          FLOORPLAN_LOG_JSON        Emit log lines as JSON objects (default: 0)
          FLOORPLAN_ENABLE_METRICS  Collect generation metrics (default: 1)

        Examples:
          # Generate the default 36x24 plan for seed 7
          python run.py generate --seed 7 --pretty

          # Relax the strict door / exit checks and keep the best attempt
          python run.py generate --doors 12 --best-effort

          # Run the API server on a custom port
          python run.py server --port 8080

          # Load variables from .env then generate
          python run.py --env-file .env generate
        """
    )

    parser = argparse.ArgumentParser(
        prog="hallway-planner",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Hallway Planner {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen = subparsers.add_parser(
        "generate",
        help="Generate one floor plan and print it as JSON",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    gen.add_argument("--width", type=float, help="Plan width in metres (12-100, default 36)")
    gen.add_argument("--height", type=float, help="Plan height in metres (12-100, default 24)")
    gen.add_argument("--hallways", dest="hallway_count", type=int, help="Number of hallways (1-12, default 1)")
    gen.add_argument("--doors", dest="door_count", type=int, help="Requested room-connected doors (0-40, default 6)")
    gen.add_argument("--style", dest="room_shape_style", type=int, help="Room shape style 0 (compact) - 100 (organic)")
    gen.add_argument("--door-width", dest="door_width", type=float, help="Door width in metres (0.8-2.5)")
    gen.add_argument("--windows", dest="max_window_count", type=int, help="Maximum window count (0-40)")
    gen.add_argument("--window-width", dest="window_width", type=float, help="Window width in metres (0.8-2.8)")
    gen.add_argument("--corridor-width", dest="corridor_width_cells", type=int, help="Hallway width in cells (1-5)")
    gen.add_argument("--seed", help="Integer seed or any string (hashed)")
    gen.add_argument(
        "--best-effort",
        action="store_true",
        help="Disable strict door-count and exterior-exit checks",
    )
    gen.add_argument("--metrics", action="store_true", help="Include generation metrics in the output")
    gen.add_argument("--pretty", action="store_true", help="Indent the JSON output")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the floor plan HTTP API",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    server_parser.add_argument("--host", help="Bind address (overrides HOST)")
    server_parser.add_argument("--port", type=int, help="Port (overrides PORT)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    # Default to generate when no subcommand given; it goes right after the global flags
    argv = list(argv)
    pos = _global_flags_end(argv)
    if (pos >= len(argv) or argv[pos] not in ("generate", "server")) and not any(
        a in ("-h", "--help", "--version") for a in argv[:pos + 1]
    ):
        argv.insert(pos, "generate")

    return parser.parse_args(argv)


_OPTION_FLAGS = (
    "width",
    "height",
    "hallway_count",
    "door_count",
    "room_shape_style",
    "door_width",
    "max_window_count",
    "window_width",
    "corridor_width_cells",
    "seed",
)


def _options_from_args(args) -> dict:
    options = {name: getattr(args, name) for name in _OPTION_FLAGS if getattr(args, name, None) is not None}
    if args.best_effort:
        options["strict_door_count"] = False
        options["require_exterior_exits"] = False
    return options


def _paint(color: str, text: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def run_generate(args) -> int:
    from app.floorplan import FloorPlanError, generate_floor_plan

    try:
        plan = generate_floor_plan(_options_from_args(args), enable_metrics=True if args.metrics else None)
    except FloorPlanError as exc:
        print(f"{_paint(Fore.RED, '[ERROR]')} {exc}", file=sys.stderr)
        for hint in exc.suggestions:
            print(f"  {_paint(Fore.YELLOW, '-')} {hint}", file=sys.stderr)
        return EXIT_STRICT_FAILURE
    print(json.dumps(plan.to_dict(include_metrics=args.metrics), indent=2 if args.pretty else None))
    meta = plan.meta
    print(
        f"{_paint(Fore.CYAN, '[INFO]')} seed={meta.seed} rooms={meta.room_count} "
        f"doors={meta.placed_door_count}/{meta.requested_door_count} windows={meta.window_count}",
        file=sys.stderr,
    )
    return 0


def run_server(args) -> int:
    host = args.host or os.getenv("HOST", "0.0.0.0")
    port = int(args.port or os.getenv("PORT", "5000"))
    debug = bool(args.debug or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from app.logging_utils import log
    from app.server import start_server

    title = _paint(Fore.CYAN + Style.BRIGHT, "Hallway Planner API")
    divider = _paint(Fore.MAGENTA, "=" * 40)
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {_paint(Fore.YELLOW, 'Host:'):12} {_paint(Fore.GREEN, host)}",
        f"  {_paint(Fore.YELLOW, 'Port:'):12} {_paint(Fore.GREEN, str(port))}",
        f"  {_paint(Fore.YELLOW, 'Debug:'):12} {_paint(Fore.GREEN, 'YES' if debug else 'NO')}",
        divider,
        "",
    ]
    print("\n".join(lines))
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    if args.command == "server":
        return run_server(args)
    return run_generate(args)


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
