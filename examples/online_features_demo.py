"""Fetch online features from a running Feast Serving.

    python examples/online_features_demo.py --host localhost --port 6566 \
        --feature driver:trips_today --entity driver_id=1001 --entity driver_id=1002

Connection options not given on the command line come from FEAST_SERVING_*
environment variables.
"""
from __future__ import annotations

import argparse
import asyncio

from feast_client import AsyncFeastClient, FeastClient, Row
from feast_client.core.config import ClientSettings
from feast_client.core.logging_config import configure_logging, get_logger


logger = get_logger("online_features_demo")


def _parse_entity(raw: str) -> Row:
    name, _, value = raw.partition("=")
    return Row.create().set(name, int(value) if value.lstrip("-").isdigit() else value)


def _settings(args: argparse.Namespace) -> ClientSettings:
    overrides = {k: v for k, v in {"host": args.host, "port": args.port, "project": args.project}.items() if v is not None}
    return ClientSettings(**overrides)


def run_blocking(args: argparse.Namespace) -> None:
    with FeastClient.from_settings(_settings(args)) as client:
        info = client.get_feast_serving_info()
        logger.info("serving_info", version=info.version, type=info.type)
        for row in client.get_online_features(args.feature, [_parse_entity(e) for e in args.entity]):
            print(row)


async def run_async(args: argparse.Namespace) -> None:
    async with AsyncFeastClient.from_settings(_settings(args)) as client:
        info = await client.get_feast_serving_info()
        logger.info("serving_info", version=info.version, type=info.type)
        for row in await client.get_online_features(args.feature, [_parse_entity(e) for e in args.entity]):
            print(row)


def main() -> None:
    parser = argparse.ArgumentParser(description="Feast online features demo")
    parser.add_argument("--host")
    parser.add_argument("--port", type=int)
    parser.add_argument("--project")
    parser.add_argument("--feature", action="append", default=[], help="table:feature, repeatable")
    parser.add_argument("--entity", action="append", default=[], help="name=value, repeatable")
    parser.add_argument("--aio", action="store_true", help="use the grpc.aio client")
    args = parser.parse_args()

    configure_logging(debug=True, logger_name="")
    if args.aio:
        asyncio.run(run_async(args))
    else:
        run_blocking(args)


if __name__ == "__main__":
    main()
