"""CLI commands for running compliance checks."""

import asyncio
import json
import sys

import click

from config.settings import settings
from supacheck.exceptions import ConfigurationError, PipelineError
from supacheck.models import CheckKind, ComplianceResultSet
from supacheck.service import ComplianceService
from supacheck.tracing import setup_logging

EXIT_NON_COMPLIANT = 1
EXIT_PIPELINE_ERROR = 2


async def _collect(kinds: list[CheckKind]) -> dict[CheckKind, ComplianceResultSet | PipelineError]:
    evidence_logger = setup_logging(settings)
    try:
        service = await ComplianceService.from_settings(settings, evidence_logger.logger)
        if len(kinds) == 1:
            try:
                return {kinds[0]: await service.get_status(kinds[0])}
            except (PipelineError, ConfigurationError) as e:
                return {kinds[0]: PipelineError(kinds[0].value, str(e))}
        return await service.get_all_statuses()
    finally:
        evidence_logger.close()


def _echo_summary(kind: CheckKind, result: ComplianceResultSet | PipelineError) -> None:
    if isinstance(result, PipelineError):
        click.secho(f"[{kind.value}] ERROR: {result.message}", fg="red", err=True)
        return
    click.echo(
        f"[{kind.value}] {len(result)} checked, {result.passed} passed, "
        f"{result.failed} failed, {result.unknown} unknown"
    )
    for item in result:
        line = f"  {item.status.value.upper():8} {item.identifier}"
        if item.error:
            line += f" ({item.error})"
        click.echo(line)


@click.group()
def cli():
    """Report MFA, RLS and PITR compliance for a Supabase tenant."""


@cli.command()
@click.argument("check", type=click.Choice(["mfa", "rls", "pitr", "all"]))
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
def check(check: str, as_json: bool):
    """Run one compliance check, or all of them.

    Exits 1 when any item fails or is unknown, 2 when a check
    could not run at all.
    """
    kinds = list(CheckKind) if check == "all" else [CheckKind(check)]
    results = asyncio.run(_collect(kinds))

    if as_json:
        payload = {
            kind.value: (
                {"error": result.message}
                if isinstance(result, PipelineError)
                else result.to_dict()
            )
            for kind, result in results.items()
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        for kind, result in results.items():
            _echo_summary(kind, result)

    if any(isinstance(r, PipelineError) for r in results.values()):
        sys.exit(EXIT_PIPELINE_ERROR)
    if not all(r.is_compliant for r in results.values()):
        sys.exit(EXIT_NON_COMPLIANT)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=None, type=int, help="Port (defaults to PORT setting)")
def serve(host: str, port: int | None):
    """Run the compliance status API."""
    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port or settings.port)


if __name__ == "__main__":
    cli()
