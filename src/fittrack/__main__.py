from __future__ import annotations

import argparse
import logging

import uvicorn

from .core.registry import FitnessRegistry
from .core.sample import seed_sample_data
from .runtime.app import create_app
from .runtime.shell import FitnessShell
from .sdk.client import FitTrackClient


def main() -> None:
    p = argparse.ArgumentParser(prog="fittrack", description="fittrack: in-memory fitness record keeper")
    p.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"])
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP API in the foreground")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--sample", action="store_true", help="seed demo users")

    shell = sub.add_parser("shell", help="interactive text menu")
    shell.add_argument("--url", default=None, help="use a running server instead of a local registry")
    shell.add_argument("--sample", action="store_true", help="seed demo users (local registry only)")

    args = p.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        registry = FitnessRegistry()
        if args.sample:
            seed_sample_data(registry)
        uvicorn.run(create_app(registry), host=args.host, port=args.port, log_level=args.log_level)
        return

    if args.url:
        ops = FitTrackClient(args.url)
    else:
        ops = FitnessRegistry()
        if args.sample:
            seed_sample_data(ops)
    FitnessShell(ops).run()


if __name__ == "__main__":
    main()
