"""
EmailGate — CLI Entry Point

Usage:
  # Validate a list of addresses (file, --text, or stdin)
  python main.py batch emails.txt --export all --output results.txt
  python main.py batch --text "a@x.com, b@x.com; c@x.com"

  # Validate one address
  python main.py single jane@acme.com

  # Show oracle configuration
  python main.py status
"""

import argparse
import asyncio
import logging
import signal
import sys

from dotenv import load_dotenv
load_dotenv()

from emailgate.domain.errors import EmailGateError, InputError
from emailgate.use_cases.export_results import EXPORT_FILENAMES, format_results

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("emailgate")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="EmailGate — batch email validation against a verification API"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # batch command
    batch_parser = subparsers.add_parser("batch", help="Validate up to 100 addresses")
    batch_parser.add_argument(
        "file", nargs="?", help="File with addresses (newline/comma/semicolon separated); stdin if omitted"
    )
    batch_parser.add_argument("--text", help="Addresses given inline instead of a file")
    batch_parser.add_argument(
        "--concurrency", type=int, default=None, help="In-flight lookups (default: from config)"
    )
    batch_parser.add_argument(
        "--export", choices=sorted(EXPORT_FILENAMES), default=None, help="Write a plain-text export"
    )
    batch_parser.add_argument("--output", help="Export path (default: standard file name for the export)")

    # single command
    single_parser = subparsers.add_parser("single", help="Validate one address")
    single_parser.add_argument("email", help="Address to validate")

    # status command
    subparsers.add_parser("status", help="Show verification API configuration")

    return parser.parse_args(argv)


def read_input(args) -> str:
    if args.text:
        return args.text
    if args.file:
        try:
            with open(args.file, encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Cannot read {args.file}: {e}")
    return sys.stdin.read()


def print_report(report) -> None:
    print("\n" + "=" * 70)
    print("EMAIL VALIDATION REPORT")
    print("=" * 70)
    print(report.format_summary())
    if not report.complete:
        print("⚠ Batch was cancelled — the report only covers processed addresses.")
    print(f"\n✅ Valid ({report.valid_count}):")
    for email in report.valid_emails:
        print(f"  • {email}")
    print(f"\n❌ Invalid ({report.invalid_count}):")
    for result in report.invalid_emails:
        line = f"  • {result.email} - {result.reason}"
        if result.suggestion:
            line += f" (did you mean {result.suggestion}?)"
        if result.error:
            line += f" [{result.error}]"
        print(line)
    print("=" * 70)


async def run_batch(args) -> int:
    from emailgate.infrastructure.config import Config
    from emailgate.infrastructure.container import Container
    from emailgate.use_cases.validate_batch import ValidateBatchRequest

    container = Container(Config.from_env())
    use_case = container.validate_batch_use_case
    if args.concurrency:
        use_case.concurrency = max(1, args.concurrency)

    # Read before taking over SIGINT so Ctrl-C still aborts a blocked stdin read
    text = read_input(args)

    cancel_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    handler_installed = False
    try:
        loop.add_signal_handler(signal.SIGINT, cancel_event.set)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        logger.debug("Signal handlers unavailable; Ctrl-C will abort without a partial report")

    try:
        report = await use_case.execute(
            ValidateBatchRequest(emails=text, cancel_event=cancel_event)
        )
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)
    print_report(report)

    if args.export:
        path = args.output or EXPORT_FILENAMES[args.export]
        with open(path, "w", encoding="utf-8") as f:
            f.write(format_results(report, args.export))
        logger.info(f"Export written: {path}")
    return 0


async def run_single(args) -> int:
    from emailgate.infrastructure.config import Config
    from emailgate.infrastructure.container import Container

    container = Container(Config.from_env())
    result = await container.validate_single_use_case.execute(args.email)

    icon = "✅ VALID" if result.accepted else "❌ INVALID"
    print(f"\n{icon}: {result.email} — {result.reason}")
    if result.suggestion:
        print(f"💡 Did you mean: {result.suggestion}")
    if result.error:
        print(f"🔧 {result.error}")
    return 0 if result.accepted else 1


def show_status() -> int:
    from emailgate.infrastructure.config import Config
    from emailgate.infrastructure.container import Container

    status = Container(Config.from_env()).configuration_status()
    for key, value in status.items():
        print(f"{key:22s} {value}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        if args.command == "batch":
            return asyncio.run(run_batch(args))
        elif args.command == "single":
            return asyncio.run(run_single(args))
        elif args.command == "status":
            return show_status()
    except EmailGateError as e:
        print(f"\n❌ Error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
