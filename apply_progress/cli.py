#!/usr/bin/env python3
"""
Apply automation progress CLI.

Starts automation runs, follows their progress in the terminal, and serves
the reference progress API.

Examples:
  apply-progress apply-now --watch
  apply-progress watch 3f0c9a2e-...
  apply-progress serve --port 4002
"""

import argparse
import asyncio
import sys

import uvicorn

from apply_progress.application.progress_view import build_progress_view, render_text
from apply_progress.application.services.automation_service import AutomationService
from apply_progress.boundary.http.apply_client import ApplyApiClient
from apply_progress.configs import Settings, get_settings
from apply_progress.core.exceptions import ApplyProgressError
from apply_progress.models.progress import ProgressSnapshot, RunStatus
from apply_progress.observability.logger import configure_logging, get_logger

logger = get_logger(__name__)


def build_service(settings: Settings) -> AutomationService:
    client = ApplyApiClient.from_settings(
        settings.client,
        accept_envelope=settings.poller.accept_envelope,
    )
    return AutomationService(client, settings.poller)


async def follow_run(service: AutomationService, run_id: str, stuck_threshold: int) -> ProgressSnapshot | None:
    """Poll a run and print each snapshot until it is terminal."""
    poller = None

    def show(snapshot: ProgressSnapshot) -> None:
        view = build_progress_view(snapshot, poller.elapsed_seconds, stuck_threshold)
        print(render_text(view))
        print("-" * 40)

    poller = service.create_poller(run_id, on_update=show)
    poller.start()
    try:
        return await poller.wait()
    finally:
        poller.cancel()


async def run_apply_now(settings: Settings, watch: bool) -> int:
    service = build_service(settings)
    async with service.client:
        try:
            started = await service.start_run()
        except ApplyProgressError as e:
            print(f"❌ {e.message}")
            return 1

        print(f"✅ {started.message or 'Automation started successfully'}")
        print(f"Run ID: {started.run_id}")
        if not watch:
            return 0
        final = await follow_run(service, started.run_id, settings.poller.stuck_threshold_seconds)

    return 0 if final is not None and final.status is RunStatus.COMPLETED else 1


async def run_watch(settings: Settings, run_id: str) -> int:
    service = build_service(settings)
    async with service.client:
        final = await follow_run(service, run_id, settings.poller.stuck_threshold_seconds)
    return 0 if final is not None and final.status is RunStatus.COMPLETED else 1


async def run_regenerate(settings: Settings) -> int:
    service = build_service(settings)
    async with service.client:
        try:
            message = await service.regenerate_sources()
        except ApplyProgressError as e:
            print(f"❌ {e.message}")
            return 1
    print(f"✅ {message}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apply-progress",
        description="Start Apply automation runs and follow their progress",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    apply_now = subparsers.add_parser("apply-now", help="Start an automation run")
    apply_now.add_argument(
        "--watch",
        action="store_true",
        help="Follow the run until it finishes",
    )

    watch = subparsers.add_parser("watch", help="Follow an existing run")
    watch.add_argument("run_id", help="Run ID returned by apply-now")

    subparsers.add_parser("regenerate-sources", help="Regenerate job sources")

    serve = subparsers.add_parser("serve", help="Run the reference progress API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=4002)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    if args.command == "serve":
        uvicorn.run("apply_progress.api.main:app", host=args.host, port=args.port)
        return 0
    if args.command == "apply-now":
        return asyncio.run(run_apply_now(settings, args.watch))
    if args.command == "watch":
        return asyncio.run(run_watch(settings, args.run_id))
    if args.command == "regenerate-sources":
        return asyncio.run(run_regenerate(settings))
    return 1


if __name__ == "__main__":
    sys.exit(main())
