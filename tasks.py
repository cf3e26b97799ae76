"""Task runner for the weather and currency tools.

Commands:
    python tasks.py test
    python tasks.py run-api
    python tasks.py run-cli convert-currency '{"amount": 100, "fromCurrency": "USD", "toCurrency": "EUR"}'
"""

import argparse
import subprocess
import sys


def _run(command: list[str]) -> None:
    subprocess.run(command, check=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Weather and currency tools task runner")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("test", help="Run the pytest suite (HTTP is mocked)")
    subparsers.add_parser("lint", help="Byte-compile the project sources")
    subparsers.add_parser("run-api", help="Serve the tools over HTTP on 127.0.0.1:8000")
    run_cli = subparsers.add_parser("run-cli", help="Invoke one tool from the CLI")
    run_cli.add_argument("tool", help="Tool name, e.g. convert-currency")
    run_cli.add_argument("arguments", nargs="?", default="{}", help="Tool arguments as JSON")

    args = parser.parse_args()
    if args.command == "test":
        _run([sys.executable, "-m", "pytest", "-q"])
        return

    if args.command == "lint":
        _run([sys.executable, "-m", "compileall", "-q", "api.py", "main.py", "core", "tools", "tests"])
        return

    if args.command == "run-api":
        _run(
            [
                sys.executable,
                "-m",
                "uvicorn",
                "api:app",
                "--host",
                "127.0.0.1",
                "--port",
                "8000",
                "--reload",
            ]
        )
        return

    if args.command == "run-cli":
        _run([sys.executable, "main.py", args.tool, args.arguments])
        return

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
