"""CLI interface for expbackoff"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Awaitable, Callable, Dict, Optional

import click

from expbackoff.application.runner import (
    arun_to_completion,
    cached_async,
    cached_async_sequence,
    create_async_sequence,
)
from expbackoff.domain.config import BackoffConfig
from expbackoff.domain.errors import ConfigurationError
from expbackoff.domain.events import NullObserver
from expbackoff.infrastructure.config.config_manager import ConfigManager
from expbackoff.infrastructure.delay import DelayGenerator

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)
    logging.getLogger("expbackoff").setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _load_config(ctx: click.Context, **overrides) -> BackoffConfig:
    """Load config file/env settings and apply CLI overrides"""
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        return config_manager.with_overrides(**overrides)
    except ConfigurationError as e:
        _die(str(e), verbose=verbose, exc=e)


async def _immediate(attempt: int) -> None:
    await asyncio.sleep(0)


async def _bench_normal(size: int, config: BackoffConfig) -> None:
    for _ in range(size):
        await arun_to_completion(_immediate, config, observer=NullObserver())


async def _bench_cached(size: int, config: BackoffConfig) -> None:
    run = cached_async(config, observer=NullObserver())
    for _ in range(size):
        await run(_immediate)


async def _bench_iterator(size: int, config: BackoffConfig) -> None:
    for _ in range(size):
        async for _attempt in create_async_sequence(_immediate, config, observer=NullObserver()):
            pass


async def _bench_cached_iterator(size: int, config: BackoffConfig) -> None:
    sequence = cached_async_sequence(config, observer=NullObserver())
    for _ in range(size):
        async for _attempt in sequence(_immediate):
            pass


BENCH_MODES: Dict[str, Callable[[int, BackoffConfig], Awaitable[None]]] = {
    "normal": _bench_normal,
    "cached": _bench_cached,
    "iterator": _bench_iterator,
    "cached-iterator": _bench_cached_iterator,
}


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .expbackoff.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """expbackoff - retry driver with randomized exponential backoff"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option("--attempts", "-n", type=click.IntRange(min=1), default=5, show_default=True,
              help="Number of failed attempts to draw delays for")
@click.option("--seed", type=int, help="Random seed. Overrides config.")
@click.option("--delay-interval", type=int, help="Slot length in milliseconds. Overrides config.")
@click.option("--base", type=int, help="Exponential base. Overrides config.")
@click.option("--max-exponent", type=int, help="Exponent cap. Overrides config.")
@click.pass_context
def schedule(ctx, attempts: int, seed: int, delay_interval: int, base: int, max_exponent: int):
    """Print the delay drawn after each failed attempt."""
    config = _load_config(
        ctx, seed=seed, delay_interval=delay_interval, base=base, max_exponent=max_exponent
    )
    generator = DelayGenerator.from_config(config)

    click.echo(f"{'attempt':>8}  {'upper bound (ms)':>16}  {'delay (ms)':>10}")
    for attempt in range(attempts):
        click.echo(f"{attempt:>8}  {generator.upper_bound(attempt):>16}  {generator.next(attempt):>10}")


@cli.command()
@click.option("--size", type=click.IntRange(min=1), default=10000, show_default=True,
              help="Invocations per mode")
@click.option(
    "--mode",
    "modes",
    type=click.Choice(list(BENCH_MODES), case_sensitive=False),
    multiple=True,
    help="Mode to run (repeatable). Defaults to all modes.",
)
@click.pass_context
def bench(ctx, size: int, modes: tuple):
    """Time the entry points on work that succeeds immediately."""
    config = _load_config(ctx)
    for name in modes or BENCH_MODES:
        click.echo(f"testing {name}")
        start = time.perf_counter()
        asyncio.run(BENCH_MODES[name.lower()](size, config))
        elapsed = time.perf_counter() - start
        click.echo(f"{name}: {elapsed * 1000:.3f}ms")
        click.echo(f"average invocation time {elapsed * 1000 / size:.6f}ms")
        click.echo("-" * 54)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
