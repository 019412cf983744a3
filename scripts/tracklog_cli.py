"""tracklog command line: create, stop and list tracks."""

from __future__ import annotations

import argparse
import json
import sys

from tracklog.bootstrap import configure_logging, init
from tracklog.config import TracklogSettings
from tracklog.environments import EnvironmentLoadError
from tracklog.storage import RepositoryError
from tracklog.tracks import Track, TrackService


def load_service(settings: TracklogSettings, environment: str | None) -> TrackService:
    return init(settings, environment=environment)


def _format_track(track: Track) -> str:
    end = track.end.isoformat() if track.end is not None else "running"
    return " | ".join(
        [
            track.id,
            track.name,
            f"project={track.project}",
            f"workspace={track.workspace}",
            f"start={track.start.isoformat()}",
            f"end={end}",
        ]
    )


def cmd_create(args: argparse.Namespace, service: TrackService) -> None:
    track = service.start_new_track(args.name, args.project, args.workspace)
    print("Track created:")
    print(json.dumps(track.to_dict(), indent=2))


def cmd_stop(args: argparse.Namespace, service: TrackService) -> None:
    service.stop_current_track()
    print("Current track stopped")


def cmd_list(args: argparse.Namespace, service: TrackService) -> None:
    tracks = service.list()
    if args.json:
        print(json.dumps([track.to_dict() for track in tracks], indent=2))
        return
    print("List of all tracks")
    for track in tracks:
        print(_format_track(track))


def build_parser() -> argparse.ArgumentParser:
    # -e/--env is accepted before or after the subcommand
    env_parent = argparse.ArgumentParser(add_help=False)
    env_parent.add_argument(
        "-e",
        "--env",
        dest="environment",
        default=argparse.SUPPRESS,
        metavar="STRING",
        help='Sets an environment value, defaults to TRACKLOG_ENV or "dev"',
    )

    parser = argparse.ArgumentParser(description="tracklog time tracker", parents=[env_parent])
    sub = parser.add_subparsers(dest="cmd")

    p_create = sub.add_parser("create", help="Create track", parents=[env_parent])
    p_create.add_argument("-n", "--name", required=True, help="Name the task")
    p_create.add_argument("-p", "--project", required=True, help="Project of the task")
    p_create.add_argument("-w", "--workspace", required=True, help="Workspace of the project")
    p_create.set_defaults(func=cmd_create)

    p_stop = sub.add_parser("stop", help="Stop current track", parents=[env_parent])
    p_stop.set_defaults(func=cmd_stop)

    p_list = sub.add_parser("list", help="List tracks", parents=[env_parent])
    p_list.add_argument("--json", action="store_true", help="Output JSON")
    p_list.set_defaults(func=cmd_list)

    return parser


def run(args: argparse.Namespace) -> int:
    settings = TracklogSettings()
    configure_logging(settings.log_level)
    try:
        service = load_service(settings, getattr(args, "environment", None))
        args.func(args, service)
    except EnvironmentLoadError as exc:
        print(f"Environment configuration invalid: {exc}", file=sys.stderr)
        return 1
    except RepositoryError as exc:
        print(f"Track storage error: {exc}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    exit_code = run(args)
    if exit_code:
        raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
