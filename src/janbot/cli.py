import asyncio

import typer
from rich import print as rprint
from rich.table import Table

from janbot.billing import BillingClient, calculate_usage_percentage, format_token_count
from janbot.llm import MODEL_CONFIGS, PROVIDER_DISPLAY_NAMES, ProviderRouter

app = typer.Typer(no_args_is_help=True)


@app.command()
def models() -> None:
    """List registered models and whether their provider has a key."""
    router = ProviderRouter()
    available = set(router.get_available_models())

    table = Table(title="Janbot models")
    table.add_column("Model")
    table.add_column("Provider")
    table.add_column("Context", justify="right")
    table.add_column("Available")
    for model_id, config in MODEL_CONFIGS.items():
        table.add_row(
            f"{config.display_name} [dim]({model_id})[/dim]",
            PROVIDER_DISPLAY_NAMES[config.provider],
            format_token_count(config.max_tokens) if config.max_tokens else "-",
            "[green]yes[/green]" if model_id in available else "[red]no[/red]",
        )
    rprint(table)
    rprint(f"Default model: [cyan]{router.default_model}[/cyan]")


@app.command()
def usage(token: str = typer.Option(..., envvar="JANBOT_JWT", help="Bearer JWT")) -> None:
    """Show the organization's token usage for the current period."""
    result = asyncio.run(BillingClient(token).get_token_usage())
    if not result.success or result.data is None:
        rprint(f"[red]Could not fetch usage:[/red] {result.error}")
        raise typer.Exit(code=1)

    data = result.data
    percentage = calculate_usage_percentage(data.used, data.included)
    period = (
        f" for {data.period_start} → {data.period_end}"
        if data.period_start and data.period_end
        else ""
    )
    rprint(
        f"[bold]{format_token_count(data.used)}[/bold] / {format_token_count(data.included)} "
        f"tokens ({percentage}%){period}"
    )
    if data.remaining < 0:
        rprint(f"[yellow]Overage:[/yellow] {format_token_count(-data.remaining)} tokens")


@app.command()
def serve(host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
    """Run the chat API with uvicorn."""
    import uvicorn

    uvicorn.run("janbot.api.main:app", host=host, port=port, reload=reload)


def main() -> None:
    """Entry point for the CLI."""
    app()
