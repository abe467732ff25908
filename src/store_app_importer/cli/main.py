"""
Store App Importer CLI — imports store applications into the device-management backend.

Usage:
    store-app-importer import --apps apps.json --secrets-file secrets.json
    store-app-importer import --apps apps.json --poll --report ./report.json
    store-app-importer validate --apps apps.json
"""

import asyncio
import json
import logging
import sys

import aiofiles
import click
from rich.console import Console
from rich.table import Table

from store_app_importer.core.errors import ImporterError, InvalidInput
from store_app_importer.core.importer import DEFAULT_SETTLE_DELAY


async def read_json(path: str):
    """Read and decode a JSON input file."""
    async with aiofiles.open(path) as f:
        content = await f.read()
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"{path} is not valid JSON: {e}") from e


async def load_apps(path: str):
    from store_app_importer.models.descriptor import load_descriptors

    return load_descriptors(await read_json(path))


async def resolve_credentials(secrets_file, tenant_id, client_id, client_secret) -> tuple[str, str, str]:
    """Merge the secrets file under explicit options / environment variables."""
    secrets = await read_json(secrets_file) if secrets_file else {}
    if not isinstance(secrets, dict):
        raise InvalidInput(f"{secrets_file} must contain a JSON object")
    tenant_id = tenant_id or secrets.get("tenantId")
    client_id = client_id or secrets.get("clientId")
    client_secret = client_secret or secrets.get("clientSecret")

    missing = [
        name
        for name, value in (("tenant id", tenant_id), ("client id", client_id), ("client secret", client_secret))
        if not value
    ]
    if missing:
        raise click.UsageError(f"Missing credentials: {', '.join(missing)}")
    return tenant_id, client_id, client_secret


def configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def print_summary(console: Console, results) -> None:
    """Print a per-application summary table."""
    table = Table(title="Import Summary")
    table.add_column("Package")
    table.add_column("Result")
    table.add_column("Application ID")
    table.add_column("Assignments", justify="right")
    table.add_column("Error")

    for r in results:
        if r.succeeded:
            table.add_row(
                r.package_identifier, "[green]imported[/green]", r.application_id, str(r.assignments_submitted), ""
            )
        else:
            table.add_row(
                r.package_identifier,
                f"[red]{r.state.value}[/red]",
                r.application_id or "-",
                "-",
                f"{r.stage.value}: {r.error_kind}: {r.message}",
            )
    console.print(table)

    failed = sum(1 for r in results if not r.succeeded)
    console.print(f"Total: {len(results)} | Imported: {len(results) - failed} | Failed: {failed}")


@click.group()
@click.version_option(package_name="store-app-importer")
def cli():
    """Store App Importer — imports store apps with icons and assignments."""
    pass


@cli.command("import")
@click.option("--apps", "-a", "apps_file", type=click.Path(exists=True, dir_okay=False), required=True,
              help="JSON file with the applications to import.")
@click.option("--secrets-file", "-s", type=click.Path(exists=True, dir_okay=False), default=None,
              help="JSON file with tenantId, clientId and clientSecret.")
@click.option("--tenant-id", envvar="AZURE_TENANT_ID", default=None, help="Directory (tenant) id.")
@click.option("--client-id", envvar="AZURE_CLIENT_ID", default=None, help="Application (client) id.")
@click.option("--client-secret", envvar="AZURE_CLIENT_SECRET", default=None, help="Client secret.")
@click.option("--settle-delay", type=float, default=DEFAULT_SETTLE_DELAY, show_default=True,
              help="Seconds to wait after creating an app before assigning it.")
@click.option("--poll", is_flag=True, help="Poll until each app is published instead of a fixed delay.")
@click.option("--concurrency", "-c", type=click.IntRange(min=1), default=1, show_default=True,
              help="Applications imported at once.")
@click.option("--report", "-r", type=click.Path(dir_okay=False), default=None, help="Write a JSON report here.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
def import_apps(apps_file, secrets_file, tenant_id, client_id, client_secret, settle_delay, poll,
                concurrency, report, verbose):
    """Import store applications and configure their assignments."""
    configure_logging(verbose)
    console = Console()

    try:
        results = asyncio.run(
            _run_import(
                console, apps_file, secrets_file, tenant_id, client_id, client_secret,
                settle_delay, poll, concurrency, report,
            )
        )
    except ImporterError as e:
        raise click.ClickException(f"{e.kind}: {e.message}") from e

    print_summary(console, results)
    if any(not r.succeeded for r in results):
        sys.exit(1)


async def _run_import(console, apps_file, secrets_file, tenant_id, client_id, client_secret,
                      settle_delay, poll, concurrency, report):
    from pathlib import Path

    import httpx

    from store_app_importer.cli.progress import ProgressEventSink
    from store_app_importer.core.auth import BackendContext, ClientCredentialsProvider
    from store_app_importer.core.orchestrator import ImportOrchestrator
    from store_app_importer.exporters import JSONReportExporter

    descriptors = await load_apps(apps_file)
    credentials = await resolve_credentials(secrets_file, tenant_id, client_id, client_secret)

    timeout = httpx.Timeout(30.0, connect=60.0)
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        token = await ClientCredentialsProvider(*credentials).acquire(client)

        with ProgressEventSink.open(console, total=len(descriptors)) as sink:
            orchestrator = ImportOrchestrator.create(
                client,
                BackendContext(token=token),
                sink=sink,
                settle_delay=settle_delay,
                poll=poll,
                concurrency=concurrency,
            )
            results = await orchestrator.run(descriptors)

    if report:
        await JSONReportExporter(Path(report)).export(results)
    return results


@cli.command()
@click.option("--apps", "-a", "apps_file", type=click.Path(exists=True, dir_okay=False), required=True,
              help="JSON file with the applications to import.")
def validate(apps_file):
    """Parse an apps file and list what would be imported."""
    try:
        descriptors = asyncio.run(load_apps(apps_file))
    except InvalidInput as e:
        raise click.ClickException(f"InvalidInput: {e.message}") from e

    for d in descriptors:
        targets = ", ".join(
            f"{a.raw_target_type}:{a.intent.value}" + (f" ({a.group_id})" if a.group_id else "")
            for a in d.assignments
        )
        click.echo(f"{d.package_identifier} featured={d.is_featured} assignments=[{targets}]")
    click.echo(f"{len(descriptors)} application(s) valid.")


if __name__ == "__main__":
    cli()
