"""
ZTrust Command Line Interface

Runs scripted session scenarios against the trust/session core.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from ztrust.core.config import ZTrustConfig, set_config
from ztrust.core.logging import configure_logging
from ztrust.security.types import SessionState
from ztrust.session.controller import SessionController


def main(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="ztrust",
        description="ZTrust - continuous authentication session console",
    )
    parser.add_argument("--config", type=Path, help="JSON configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run an isolation scenario")
    demo_parser.add_argument("--identifier", default="demo@ztrust.io", help="Principal identifier")
    demo_parser.add_argument(
        "--signals",
        default="wifi,bot",
        help="Comma-separated signal ids to activate",
    )
    demo_parser.add_argument(
        "--drop-at",
        type=int,
        default=None,
        help="Deactivate the first signal after this many countdown ticks",
    )
    demo_parser.add_argument(
        "--tick-interval",
        type=float,
        default=None,
        help="Seconds per countdown tick",
    )
    demo_parser.add_argument("--fast", action="store_true", help="Skip simulated delays")

    # Config command
    subparsers.add_parser("config", help="Print the effective configuration")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    config = ZTrustConfig.from_file(args.config) if args.config else ZTrustConfig()
    set_config(config)
    configure_logging(config.logging)

    if args.command == "config":
        print(json.dumps(config.model_dump(mode="json"), indent=2))
        return 0

    if args.command == "demo":
        if args.tick_interval is not None:
            config.isolation.tick_interval = args.tick_interval
        if args.fast:
            config.session.credential_check_delay = 0.0
            config.session.routing_delay = 0.0
            config.advisory.latency_min = 0.0
            config.advisory.latency_max = 0.0
        signal_ids = [s.strip() for s in args.signals.split(",") if s.strip()]
        report = asyncio.run(run_demo(config, args.identifier, signal_ids, args.drop_at))
        print(json.dumps(report, indent=2))
        return 0

    parser.print_help()
    return 1


async def run_demo(
    config: ZTrustConfig,
    identifier: str,
    signal_ids: list[str],
    drop_at: Optional[int] = None,
) -> dict:
    """
    Log in, raise risk with ``signal_ids`` and follow the countdown.

    With ``drop_at`` the first signal is switched off after that many ticks,
    which should cancel the countdown before isolation.
    """
    controller = SessionController(config=config, auto_tick=False)
    try:
        await controller.login(identifier)
        await controller.verify_second_factor()

        for signal_id in signal_ids:
            await controller.toggle_signal(signal_id)

        ticks = 0
        while controller.timer.armed:
            await asyncio.sleep(config.isolation.tick_interval)
            controller.timer.tick()
            ticks += 1
            if drop_at is not None and ticks == drop_at and signal_ids:
                await controller.toggle_signal(signal_ids[0])

        if controller.state == SessionState.RESTRICTED:
            controller.acknowledge_restriction()

        return {
            "ticks": ticks,
            "session": controller.snapshot(),
            "journal": [e.to_dict() for e in controller.journal.entries(limit=5)],
            "metrics": controller.metrics_summary().to_dict(),
            "audit": [e.to_dict() for e in controller.audit.entries()],
        }
    finally:
        await controller.shutdown()


if __name__ == "__main__":
    sys.exit(main())
