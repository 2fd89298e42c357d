"""CLI entry point for the password validator."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from password_validator.config import get_settings

app = typer.Typer(
    name="pwv",
    help="Password Validator CLI - manage tenant rules and validate passwords",
    add_completion=False,
)

console = Console()


def run_async(coro):
    """Helper to run async code from sync CLI."""
    return asyncio.run(coro)


@app.command("init-db")
def init_database():
    """Create the rule registry tables."""
    from password_validator.database import close_db, init_db

    async def _init():
        try:
            await init_db()
        finally:
            await close_db()

    run_async(_init())
    console.print("[green]✓ Database initialized[/green]")


@app.command("seed-rules")
def seed_rules(
    tenant: str = typer.Argument(..., help="Tenant identifier"),
):
    """Install the default rule set for a tenant."""
    from password_validator.database import async_session_maker, close_db
    from password_validator.services.registry import RuleRegistryService

    async def _seed():
        try:
            async with async_session_maker() as session:
                counts = await RuleRegistryService(session).load_default_rules(tenant)
                await session.commit()
                return counts
        finally:
            await close_db()

    counts = run_async(_seed())
    console.print(
        f"[green]✓ Default rules loaded for {tenant}:[/green] "
        f"{counts['created']} created, {counts['skipped']} skipped"
    )


@app.command("rules")
def list_rules(
    tenant: str = typer.Argument(..., help="Tenant identifier"),
    state: Optional[str] = typer.Option(None, "--state", "-s", help="Filter by state (Enabled, Disabled)"),
    limit: int = typer.Option(100, "--limit", "-l", help="Maximum number of rules to show"),
):
    """List a tenant's rules in evaluation order."""
    from password_validator.database import async_session_maker, close_db
    from password_validator.services.registry import RuleRegistryService

    async def _list():
        try:
            async with async_session_maker() as session:
                return await RuleRegistryService(session).list_rules(tenant, state=state, limit=limit)
        finally:
            await close_db()

    rules, total = run_async(_list())

    table = Table(title=f"Rules for {tenant} ({total} total)")
    table.add_column("Order", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Validation")
    table.add_column("State")
    table.add_column("Error code", style="yellow")
    for rule in rules:
        table.add_row(
            str(rule.order_no),
            rule.name,
            rule.type,
            rule.validation_type,
            rule.state,
            rule.err_message_id,
        )
    console.print(table)


@app.command("validate")
def validate_password(
    tenant: str = typer.Option(..., "--tenant", "-t", help="Tenant identifier"),
    user_id: str = typer.Option(..., "--user-id", "-u", help="User the password belongs to"),
    okapi_url: Optional[str] = typer.Option(None, "--okapi-url", help="Gateway URL for user lookup and remote rules"),
    token: Optional[str] = typer.Option(None, "--token", envvar="OKAPI_TOKEN", help="Token forwarded to remote calls"),
    password: str = typer.Option(..., prompt=True, hide_input=True, help="Password to validate"),
):
    """Validate a password against a tenant's rules."""
    from password_validator.database import async_session_maker, close_db
    from password_validator.http_client import create_http_client
    from password_validator.services.context import RequestContext
    from password_validator.services.engine import ValidationEngine
    from password_validator.services.errors import ValidationEngineError
    from password_validator.services.evaluators import ProgrammaticRuleEvaluator
    from password_validator.services.identity import HttpIdentityResolver
    from password_validator.services.rule_source import RepositoryRuleSource

    settings = get_settings()
    context = RequestContext(
        tenant_id=tenant,
        okapi_url=okapi_url or settings.okapi_url,
        token=token,
    )

    async def _validate():
        try:
            async with create_http_client() as client:
                engine = ValidationEngine(
                    rule_source=RepositoryRuleSource(async_session_maker, limit=settings.rules_fetch_limit),
                    identity_resolver=HttpIdentityResolver(client, timeout=settings.lookup_timeout_seconds),
                    programmatic_evaluator=ProgrammaticRuleEvaluator(
                        client, timeout=settings.lookup_timeout_seconds
                    ),
                )
                return await engine.validate(user_id, password, context)
        finally:
            await close_db()

    try:
        verdict = run_async(_validate())
    except ValidationEngineError as e:
        console.print(f"[red]✗ Validation could not be completed:[/red] {e.message}")
        raise typer.Exit(2)

    if verdict.is_valid:
        console.print("[green]✓ Password is valid[/green]")
        return

    console.print("[red]✗ Password is invalid[/red]")
    for message in verdict.messages:
        console.print(f"  - {message}")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
