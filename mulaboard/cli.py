"""
Command-line interface for MulaBoard.

Usage:
    mulaboard serve           # Run the API server
    mulaboard init-db         # Create tables and indexes
    mulaboard health          # Check PostgreSQL and Redis
    mulaboard purge-attempts  # Delete submission attempts past retention
    mulaboard attempt-stats   # Submission attempt counts by outcome
"""

import asyncio
import sys
from contextlib import asynccontextmanager

import click

from mulaboard.config.settings import get_settings
from mulaboard.observability.logging import setup_logging
from mulaboard.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """MulaBoard - anonymous feedback with Mula ratings."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()

    settings = get_settings()
    if settings.tracing_enabled:
        from mulaboard.observability.tracing import setup_tracing

        setup_tracing(
            service_name=settings.otel_service_name,
            otlp_endpoint=settings.otel_exporter_otlp_endpoint,
        )


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(host: str | None, port: int | None, reload: bool, metrics_port: int | None) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    metrics_port = metrics_port or settings.metrics_port

    get_metrics().start_server(port=metrics_port)

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "mulaboard.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@asynccontextmanager
async def _open_database():
    """Connected Database for the duration of one command."""
    from mulaboard.storage.database import Database

    db = Database()
    await db.connect()
    try:
        yield db
    finally:
        await db.close()


@main.command("init-db")
def init_db() -> None:
    """Create tables and indexes."""
    from mulaboard.storage.schema import create_tables

    async def run():
        async with _open_database() as db:
            await create_tables(db)
        click.echo("Database initialized successfully")

    asyncio.run(run())


async def _ping_redis() -> bool:
    import redis.asyncio as redis

    client = redis.from_url(str(get_settings().redis_url))
    try:
        return bool(await client.ping())
    finally:
        await client.aclose()


async def _ping_postgres() -> bool:
    async with _open_database() as db:
        return await db.health_check()


@main.command()
def health() -> None:
    """Check that PostgreSQL and Redis are reachable."""
    import structlog

    logger = structlog.get_logger(__name__)
    probes = {"redis": _ping_redis, "postgres": _ping_postgres}

    async def check() -> dict[str, bool]:
        results: dict[str, bool] = {}
        for name, probe in probes.items():
            try:
                results[name] = await probe()
            except Exception as e:
                logger.error("Health probe failed", component=name, error=str(e))
                results[name] = False
        return results

    results = asyncio.run(check())
    for name, ok in results.items():
        click.secho(f"  {'✓' if ok else '✗'} {name}: {ok}", fg="green" if ok else "red")

    if all(results.values()):
        click.secho("All services healthy!", fg="green")
        sys.exit(0)
    click.secho("Some services unhealthy!", fg="red")
    sys.exit(1)


@main.command("purge-attempts")
@click.option("--days", default=None, type=int, help="Days of attempts to keep")
@click.option("--dry-run", is_flag=True, help="Show count without deleting")
def purge_attempts(days: int | None, dry_run: bool) -> None:
    """Delete submission attempts older than the retention window.

    Example:
        mulaboard purge-attempts                       # Default retention (365 days)
        mulaboard purge-attempts --days 90 --dry-run   # Preview without deleting
    """
    from mulaboard.eligibility.config import EligibilityConfig
    from mulaboard.eligibility.repository import AttemptRepository

    retention_days = days or EligibilityConfig().attempt_retention_days

    async def run():
        async with _open_database() as db:
            repo = AttemptRepository(db)
            if dry_run:
                count = await repo.count_expired(retention_days)
                click.echo(
                    f"Dry run - would delete {count} attempts older than {retention_days} days"
                )
                return
            deleted = await repo.purge_expired(retention_days)
        click.echo(f"Deleted {deleted} attempts older than {retention_days} days")

    asyncio.run(run())


@main.command("attempt-stats")
@click.option("--period", "period_id", default=None, help="Review period ID")
def attempt_stats(period_id: str | None) -> None:
    """Show submission attempt counts by outcome."""
    from mulaboard.eligibility.repository import AttemptRepository

    async def run():
        async with _open_database() as db:
            return await AttemptRepository(db).get_stats(period_id)

    stats = asyncio.run(run())
    scope = f"period {period_id}" if period_id else "all periods"
    click.echo(f"Submission attempts ({scope}):")
    for label, value in (
        ("Total", stats.total),
        ("Submitted", stats.submitted),
        ("Blocked", stats.blocked),
        ("Rate limited", stats.rate_limited),
    ):
        click.echo(f"  {label + ':':<14}{value}")


if __name__ == "__main__":
    main()
