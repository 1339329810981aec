"""Command-line entry point for jobfilter."""

import argparse
import asyncio
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from jobfilter.adapters import AdapterError, BaseSiteAdapter, get_adapter, supported_sites
from jobfilter.config.environment import EnvironmentConfig
from jobfilter.config.exceptions import ConfigurationError
from jobfilter.config.loader import load_config
from jobfilter.config.models import AppConfig, SettingsBackend
from jobfilter.logging import get_logger
from jobfilter.logging.config import configure_logging
from jobfilter.logging.context import log_context
from jobfilter.page import Page, PageError
from jobfilter.pipeline import FilterPipeline
from jobfilter.scheduler import SnapshotPoller
from jobfilter.session import FilterSession
from jobfilter.store import RuleStore, StoreError, create_store, load_rule_set

logger = get_logger(__name__, component="cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobfilter",
        description="Hide job listing cards on saved recruiting pages using keyword and company rules",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    filter_parser = subparsers.add_parser("filter", help="Run one filter pass over a saved page")
    filter_parser.add_argument("page", type=Path, help="Saved HTML page")
    filter_parser.add_argument("--site", choices=supported_sites(), help="Site adapter")
    filter_parser.add_argument("--url", default=None, help="URL the page was captured from")
    filter_parser.add_argument(
        "--output", type=Path, default=None, help="Write the filtered page here (default: stdout)"
    )

    watch_parser = subparsers.add_parser(
        "watch", help="Keep re-filtering a saved page as it or the settings change"
    )
    watch_parser.add_argument("page", type=Path, help="Saved HTML page to watch")
    watch_parser.add_argument("--site", choices=supported_sites(), help="Site adapter")
    watch_parser.add_argument("--url", default=None, help="URL the page was captured from")
    watch_parser.add_argument("--output", type=Path, required=True, help="Filtered page output")

    return parser


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Args:
        config_path: Path to configuration file (None = default locations)
        log_level_override: --log-level value, wins over everything else

    Returns:
        Tuple of (AppConfig, EnvironmentConfig); env_config.log_level is set

    Raises:
        ConfigurationError: If config.yaml or the environment is invalid
    """
    app_config, env_config = load_config(config_path, allow_missing=config_path is None)

    # --log-level, then LOG_LEVEL, then logging.level in config.yaml
    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def resolve_site(cli_site: Optional[str], app_config: AppConfig) -> BaseSiteAdapter:
    site = cli_site or app_config.site
    if not site:
        raise ConfigurationError(
            "No site selected",
            suggestions=[
                f"Pass --site ({', '.join(supported_sites())})",
                "Or set 'site' in config.yaml",
            ],
        )
    return get_adapter(site)


def build_store(app_config: AppConfig, env_config: EnvironmentConfig) -> RuleStore:
    """Create the rule store; JOBFILTER_SETTINGS_DB overrides the config file."""
    if env_config.settings_db:
        return create_store(SettingsBackend.SQLITE.value, database_url=env_config.settings_db)
    settings = app_config.settings
    return create_store(settings.backend, path=settings.path, database_url=settings.database_url)


async def run_filter(
    page: Page, adapter: BaseSiteAdapter, store: RuleStore, url: Optional[str]
) -> int:
    """
    Run one pass over ``page``.

    Returns:
        Exit code (1 when any card failed to filter)
    """
    if url is not None and not adapter.matches_url(url):
        logger.warning(
            "Page URL not filtered by this site, leaving page unchanged",
            extra={"event": "cli.filter.skipped", "url": url},
        )
        return 0

    rules = await load_rule_set(store, adapter)
    result = FilterPipeline(adapter, page).run_filter_pass(rules)

    logger.info(
        f"Filter pass completed: {result.total} cards, {result.hidden} hidden, "
        f"{result.shown} shown, {result.skipped} skipped",
        extra={
            "event": "cli.filter.completed",
            "hidden_by_reason": result.hidden_by_reason,
            "had_errors": result.had_errors,
        },
    )
    return 1 if result.had_errors else 0


async def run_watch(
    page: Page,
    adapter: BaseSiteAdapter,
    store: RuleStore,
    app_config: AppConfig,
    page_path: Path,
    output_path: Path,
) -> int:
    """Start a session and the snapshot poller, then wait for SIGINT/SIGTERM."""
    session = FilterSession(page, adapter, store, app_config.watcher.to_watcher_config())
    await session.start()

    poller = SnapshotPoller(session, page_path, output_path, app_config.poll_interval)
    poller.write_output()
    poller.start()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops do not support signal handlers
            pass

    logger.info(
        "Watching page. Press Ctrl+C to stop",
        extra={"event": "cli.watch.started", "page_path": str(page_path)},
    )

    try:
        await stop.wait()
    finally:
        await poller.shutdown()
        session.dispose()
    return 0


def _write_page(page: Page, output: Optional[Path]) -> None:
    html = page.to_html()
    if output is None:
        sys.stdout.write(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the jobfilter CLI.

    Returns:
        0 on success, 1 on any handled or unexpected failure
    """
    load_dotenv()
    start_time = time.time()
    args = build_parser().parse_args(argv)
    store: Optional[RuleStore] = None

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        adapter = resolve_site(args.site, app_config)
        url = args.url or app_config.page_url
        page = Page.from_file(args.page, url=url)
        store = build_store(app_config, env_config)

        with log_context(site=adapter.name):
            logger.info(
                "jobfilter starting",
                extra={
                    "event": "service.starting",
                    "command": args.command,
                    "page_path": str(args.page),
                    "log_level": env_config.log_level,
                },
            )

            if args.command == "filter":
                exit_code = asyncio.run(run_filter(page, adapter, store, url))
                _write_page(page, args.output)
            else:
                exit_code = asyncio.run(
                    run_watch(page, adapter, store, app_config, args.page, args.output)
                )

            logger.info(
                "jobfilter stopped",
                extra={
                    "event": "service.stopping",
                    "uptime_seconds": round(time.time() - start_time, 2),
                },
            )
            return exit_code

    except ConfigurationError as e:
        print(f"jobfilter: invalid configuration\n{e}", file=sys.stderr)
        return 1
    except (AdapterError, StoreError, PageError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Startup failed: {e}",
            extra={"event": "service.startup.failed", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 0
    except Exception as e:
        print(f"jobfilter: unexpected error: {e}", file=sys.stderr)
        logger.critical(
            "Unhandled error",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        return 1
    finally:
        if store is not None:
            store.close()


if __name__ == "__main__":
    sys.exit(main())
