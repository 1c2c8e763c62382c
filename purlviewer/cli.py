"""The `purlviewer` command line interface."""

import json

import click

from purlviewer.badges import get_badges, strip_version
from purlviewer.parser import ParseError
from purlviewer.purldb import PurlDBClient
from purlviewer.viewer import inspect_purl, render_inspection


def emit_json(data) -> None:
    click.echo(json.dumps(data, indent=2))


@click.group()
@click.version_option(package_name="purlviewer")
def cli() -> None:
    """Inspect Package URLs: registry links, vulnerability links and badges."""


@cli.command("inspect")
@click.argument("purl")
@click.option(
    "--purldb/--no-purldb",
    default=False,
    help="Enrich the result with license, version and metadata from PurlDB.",
)
@click.option(
    "--all-versions",
    is_flag=True,
    help="List every PurlDB version instead of the newest ten.",
)
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
def inspect_cmd(purl: str, purldb: bool, all_versions: bool, output_json: bool) -> None:
    """Show the registry link, components and badges for PURL."""
    if purldb:
        with PurlDBClient() as client:
            result = inspect_purl(purl, purldb_client=client)
    else:
        result = inspect_purl(purl)

    if isinstance(result, ParseError):
        if output_json:
            emit_json(result.model_dump(mode="json"))
        else:
            click.echo(result.message, err=True)
        raise SystemExit(1)

    if output_json:
        emit_json(result.model_dump(mode="json", exclude_none=True))
    else:
        click.echo(render_inspection(result, show_all_versions=all_versions))


@cli.command("badges")
@click.argument("purl")
@click.option("--json", "output_json", is_flag=True, help="Output JSON format")
def badges_cmd(purl: str, output_json: bool) -> None:
    """Print the README badge markdown for PURL."""
    badges = get_badges(purl.strip())
    if output_json:
        emit_json([badge.model_dump(mode="json") for badge in badges])
        return
    for badge in badges:
        click.echo(f"{badge.label}: {badge.purl_display}")
        click.echo(badge.markdown)


@cli.command("strip")
@click.argument("purl")
def strip_cmd(purl: str) -> None:
    """Print PURL without its version."""
    click.echo(strip_version(purl.strip()))


if __name__ == "__main__":
    cli()
