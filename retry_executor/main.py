"""Demo entry point: fetch a JSON document with bounded retries.

Reads defaults from :class:`~retry_executor.config.Settings` and lets the
command line override them:

    python -m retry_executor.main --url https://example.com/data.json --max-retries 5
"""

import argparse
import asyncio
from typing import Any

from retry_executor.clients import JsonClient
from retry_executor.config import Settings
from retry_executor.exceptions import RetryError
from retry_executor.executor import RetryExecutor, RetryPolicy
from retry_executor.logger import get_logger, reset_logging, setup_logging


async def run(settings: Settings) -> Any:
    """Fetch ``settings.fetch_url`` through the retry executor.

    Returns:
        Decoded JSON document

    Raises:
        RetriesExhaustedError: If every attempt failed
    """
    setup_logging(settings)
    logger = get_logger("main")

    policy = RetryPolicy.from_settings(settings)
    logger.info(
        f"Fetching {settings.fetch_url} "
        f"(max_retries={policy.max_retries}, delay={settings.retry_delay_ms}ms)"
    )

    async with JsonClient(settings) as client:
        executor = RetryExecutor(policy, name="fetch_json")
        data = await executor.execute(client.fetch_json)

    print(f"Finally Data Is Here: {data}")
    return data


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Fetch JSON with bounded retries")
    parser.add_argument("--url", help="URL to fetch")
    parser.add_argument("--max-retries", type=int, help="Retries allowed after the first attempt")
    parser.add_argument("--delay-ms", type=int, help="Delay before each retry in milliseconds")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level",
    )
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Create settings, letting command line options win over the environment."""
    overrides = {
        "fetch_url": args.url,
        "max_retries": args.max_retries,
        "retry_delay_ms": args.delay_ms,
        "log_level": args.log_level,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    settings = build_settings(parse_args(argv))

    try:
        asyncio.run(run(settings))
    except RetryError as e:
        print(f"{e} Last error: {e.last_exception}")
        return 1
    except KeyboardInterrupt:
        print("\n⚠️ Interrupted by user")
        return 130
    finally:
        reset_logging()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
