"""VoxelForge CLI entry point.

Provides subcommands for running the HTTP API server and generating a dungeon
straight to the terminal. Accepts configuration via flags and environment
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
_COLOR_ENABLED = sys.stdout.isatty()


def _load_version() -> str:
    path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION")
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    VoxelForge Dungeon Generator

    Run the HTTP generation API or generate a single voxel dungeon and print it
    as ASCII layers or JSON. Configuration can be provided via CLI flags or
    environment variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                  Bind address for the web server (default: 0.0.0.0)
          PORT                  Port for the web server (default: 5000)
          DATABASE_URL          SQLAlchemy database URI (default: sqlite:///instance/voxelforge.db)
          DUNGEON_MAX_CELLS     Largest grid the API will generate (default: 1000000)
          VOXELFORGE_LOG_LEVEL  debug | info | warn | error (default: info)
          VOXELFORGE_LOG_JSON   1 to emit structured logs as JSON lines

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Run the server on a custom port
          python run.py server --port 8080

          # Print the layers of a small dungeon
          python run.py generate --seed 42 --size 20 6 20

          # A* corridors with meander, as JSON
          python run.py generate --seed dragon --mode astar --set noise_weight=0.5 --format json

          # Load variables from .env then run the server
          python run.py --env-file .env server
        """
    )

    parser = argparse.ArgumentParser(
        prog="VoxelForge",
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
        version=f"VoxelForge Dungeon Generator {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP generation API",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask generation API server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--db",
        dest="db_uri",
        default=None,
        help="Database URI (default: env DATABASE_URL or sqlite:///instance/voxelforge.db)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one dungeon and print it",
        formatter_class=argparse.RawTextHelpFormatter,
        description=dedent(
            """
            Generate a single dungeon. Start from defaults (or --config FILE),
            then apply --seed/--size/--rooms/--mode and any --set KEY=VALUE.
            A seed of 0 (the default) picks a random seed, printed in the output.
            """
        ),
    )
    gen_parser.add_argument("--seed", default=None, help="Integer seed or any string (hashed)")
    gen_parser.add_argument("--size", nargs=3, type=int, metavar=("X", "Y", "Z"), default=None)
    gen_parser.add_argument("--rooms", type=int, default=None, help="Room count target")
    gen_parser.add_argument("--mode", choices=("bfs", "astar"), default=None, help="Corridor search mode")
    gen_parser.add_argument("--config", dest="config_path", default=None, help="JSON file of config fields")
    gen_parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override one config field (VALUE parsed as JSON when possible)",
    )
    gen_parser.add_argument("--format", choices=("ascii", "json"), default="ascii")
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _parse_override(item: str):
    key, sep, raw = item.partition("=")
    if not sep or not key:
        raise ValueError(f"expected KEY=VALUE, got {item!r}")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key.strip(), value


def build_config(args: argparse.Namespace):
    """Assemble a normalized VoxelDungeonConfig from generate-subcommand flags."""
    from voxelforge.dungeon import VoxelDungeonConfig
    from voxelforge.routes.dungeon_api import _coerce_seed

    values = {}
    if args.config_path:
        with open(args.config_path, "r", encoding="utf-8") as f:
            values.update(json.load(f))
    if args.seed is not None:
        values["seed"] = args.seed
    if args.size is not None:
        values["size_x"], values["size_y"], values["size_z"] = args.size
    if args.rooms is not None:
        values["room_count"] = args.rooms
    if args.mode is not None:
        values["corridor_mode"] = args.mode
    for item in args.overrides:
        key, value = _parse_override(item)
        values[key] = value
    values["seed"] = _coerce_seed(values.get("seed"))
    return VoxelDungeonConfig.from_mapping(values).normalized()


def _run_generate(args: argparse.Namespace) -> int:
    from voxelforge.dungeon import ConfigError, VoxelDungeon

    try:
        config = build_config(args)
    except (ConfigError, TypeError, ValueError, OSError) as exc:
        prefix = f"{Fore.RED}[ERROR]{Style.RESET_ALL}" if _COLOR_ENABLED else "[ERROR]"
        print(f"{prefix} {exc}", file=sys.stderr)
        return 2
    dungeon = VoxelDungeon(config)
    if args.format == "json":
        print(json.dumps(dungeon.to_json(), indent=2))
        return 0
    head = f"seed={dungeon.seed} rooms={len(dungeon.rooms)} start={dungeon.start_room} end={dungeon.end_room}"
    print(f"{Fore.CYAN}{head}{Style.RESET_ALL}" if _COLOR_ENABLED else head)
    print(dungeon.to_ascii())
    return 0


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()
    if mode == "generate":
        return _run_generate(args)

    # Resolve configuration from CLI flags or env vars
    env_host = os.getenv("HOST", "0.0.0.0")
    env_port = int(os.getenv("PORT", "5000"))
    env_db = os.getenv("DATABASE_URL")

    host = getattr(args, "host", None) or env_host
    port = int(getattr(args, "port", None) or env_port)
    db_uri_cli = getattr(args, "db_uri", None)

    # Make DATABASE_URL available to the Flask app BEFORE importing it
    if db_uri_cli:
        os.environ["DATABASE_URL"] = db_uri_cli

    db_banner = db_uri_cli or env_db or "auto (instance/voxelforge.db)"

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoints only after environment is ready
    from voxelforge.logging_utils import log
    from voxelforge.server import start_server

    title = (
        f"{Fore.CYAN}{Style.BRIGHT}VoxelForge Server Bootup{Style.RESET_ALL}"
        if _COLOR_ENABLED
        else "VoxelForge Server Bootup"
    )

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Mode:'):12} {value(mode.upper())}",
        f"  {label('Host:'):12} {value(host)}",
        f"  {label('Port:'):12} {value(port)}",
        f"  {label('Database:'):12} {value(db_banner)}",
        divider,
        "",
    ]
    print("\n".join(lines))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")
    log.info(event="startup", mode=mode, host=host, port=port, db=db_banner, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
