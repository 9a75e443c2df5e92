"""Command-line entry point: refresh, read and clean up the news hooks cache."""
import json
import sys

import click

from news_hooks.errors import StoreError
from news_hooks.logging_setup import configure_logging
from news_hooks.pipeline import build_pipeline, read_news_hooks, refresh_news_hooks


@click.group()
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING (default: $LOG_LEVEL or INFO)")
@click.pass_context
def cli(ctx, log_level):
    """PR news hooks pipeline"""
    configure_logging(log_level)
    ctx.ensure_object(dict)
    if "pipeline" not in ctx.obj:
        ctx.obj["pipeline"] = build_pipeline()


@cli.command()
@click.pass_context
def refresh(ctx):
    """Fetch feeds, curate with the LLM and accumulate new hooks"""
    result = refresh_news_hooks(ctx.obj["pipeline"])
    if not result.success:
        click.secho(f"Refresh failed: {result.error}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"{result.new_count} new hooks, {len(result.items)} in cache", fg="green")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print the full response as JSON")
@click.pass_context
def read(ctx, as_json):
    """List cached hooks inside the retention window"""
    result = read_news_hooks(ctx.obj["pipeline"])
    if not result.success:
        click.secho(f"Read failed: {result.error}", fg="red", err=True)
        sys.exit(1)
    if as_json:
        click.echo(json.dumps(result.to_response(include_count=False), indent=2))
        return
    if not result.items:
        click.secho("No cached news hooks", fg="yellow")
        return
    for item in result.items:
        click.echo(f"{item.date}  {item.outlet:<22} {item.headline}")


@cli.command()
@click.pass_context
def cleanup(ctx):
    """Delete hooks older than the retention window"""
    pipeline = ctx.obj["pipeline"]
    try:
        deleted = pipeline.cleanup()
    except StoreError as e:
        click.secho(f"Cleanup failed: {e}", fg="red", err=True)
        sys.exit(1)
    click.echo(f"Deleted {deleted} hooks older than {pipeline.settings.retention_days} days")


if __name__ == "__main__":
    cli()
