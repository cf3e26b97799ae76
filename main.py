"""Command-line entrypoint: invoke one tool and print its JSON result.

Usage examples:
    python main.py weather-forecast '{"location": "London", "units": "metric"}'
    python main.py convert-currency '{"amount": 100, "fromCurrency": "USD", "toCurrency": "EUR"}'
    python main.py --list
"""

import argparse
import json
import sys
from typing import Any

from core.config import AppConfig
from core.runtime import build_registry, configure_logging


def _print_progress(event: dict[str, Any]) -> None:
    data = event["data"]
    print(f"[{data['progress']:>3}%] {data['message']}", file=sys.stderr)


def main() -> int:
    parser = argparse.ArgumentParser(description="Invoke a weather or currency tool.")
    parser.add_argument("tool", nargs="?", help="Tool name, e.g. weather-forecast")
    parser.add_argument("arguments", nargs="?", default="{}", help="Tool arguments as a JSON object")
    parser.add_argument("--list", action="store_true", help="Print tool definitions and exit")
    args = parser.parse_args()

    # Read settings from environment variables and enable file logging.
    config = AppConfig.from_env()
    configure_logging(config)
    registry = build_registry(config)

    if args.list:
        print(json.dumps(registry.definitions(), ensure_ascii=False, indent=2))
        return 0

    if not args.tool:
        parser.error("tool name is required unless --list is given")

    try:
        tool_args = json.loads(args.arguments)
    except json.JSONDecodeError as exc:
        parser.error(f"arguments must be valid JSON: {exc}")

    result = json.loads(registry.execute(args.tool, tool_args, publish_to_client=_print_progress))
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0 if "data" in result else 1


if __name__ == "__main__":
    raise SystemExit(main())
