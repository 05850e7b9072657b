"""Command line entry point: fetch through the pipeline and print JSON."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass, replace
from typing import Any, Dict, Optional, Sequence

from .config import ConfigurationError, Settings
from .entities import Result, UnitSystem
from .services.weather import WeatherService

KINDS = ("current", "hourly", "daily", "alerts", "all")


def build_parser(default_city: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weathercore", description="Fetch weather with offline fallback")
    parser.add_argument("city", nargs="?", default=default_city, help=f"City name (default: {default_city})")
    parser.add_argument("--kind", choices=KINDS, default="all", help="Which data to fetch")
    parser.add_argument("--units", choices=[unit.value for unit in UnitSystem], help="Unit system for the request")
    parser.add_argument("--log-level", help="Logging level, e.g. DEBUG")
    return parser


def serialize_result(result: Result) -> Dict[str, Any]:
    return {
        "provenance": result.provenance.value,
        "fetched_at": result.fetched_at,
        "message": result.message,
        "data": _to_jsonable(result.value),
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    args = build_parser(settings.default_city).parse_args(argv)
    if args.units:
        settings = replace(settings, unit_system=UnitSystem.parse(args.units))
    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    service = WeatherService.from_settings(settings)
    if args.kind == "all":
        snapshot = service.refresh(args.city)
        payload: Dict[str, Any] = {
            "location": snapshot.location,
            "current": serialize_result(snapshot.current),
            "hourly": serialize_result(snapshot.hourly),
            "daily": serialize_result(snapshot.daily),
            "alerts": serialize_result(snapshot.alerts),
        }
    else:
        method = getattr(service, f"get_{args.kind}")
        payload = {"location": args.city, args.kind: serialize_result(method(args.city))}

    sys.stdout.write(json.dumps(payload, default=str, indent=2))
    sys.stdout.write("\n")
    return 0


def _to_jsonable(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    if is_dataclass(value):
        return asdict(value)
    return value


__all__ = ["build_parser", "main", "serialize_result"]
