"""Monthly usage statistics."""
import typer

from ..usage import INPUT_PRICE_PER_M, OUTPUT_PRICE_PER_M, UsageTracker


def stats() -> None:
    """Show usage statistics for the current month."""
    typer.echo("📊 Usage Statistics")
    typer.echo()

    usage = UsageTracker().load()
    if usage is None:
        typer.echo("No usage data yet. Run some commands first!")
        return

    typer.echo(f"Month: {usage.month}")
    typer.echo(f"Total asks: {usage.ask_count}")
    typer.echo(f"Total edits: {usage.edit_count}")
    typer.echo(f"Total runs: {usage.run_count}")
    typer.echo(f"Total tokens: {usage.total_tokens} (input: {usage.input_tokens}, output: {usage.output_tokens})")
    typer.echo(f"Estimated cost: ${usage.estimated_cost:.4f}")
    typer.echo()
    typer.echo(f"Token pricing: Claude Sonnet (${INPUT_PRICE_PER_M:g}/M input, ${OUTPUT_PRICE_PER_M:g}/M output)")
