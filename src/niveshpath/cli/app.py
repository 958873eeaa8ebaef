"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.live import Live
from rich.table import Table

from ..playback import AsyncioScheduler
from ..render import (
    Block,
    CodeBlock,
    Heading,
    HookAction,
    ListRun,
    Rule,
)
from ..render import Table as TableBlock
from ..transcript import Message
from .display import LiveCallback
from .providers import get_controller, get_renderer, get_settings

# Create Typer app
app = typer.Typer(
    name="niveshpath",
    help="Render and play back assistant replies of the NiveshPath chat",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

SUMMARY_WIDTH = 60


def _read(file: Path) -> str:
    return file.read_text(encoding="utf-8")


def _print_html(html: str) -> None:
    console.print(html, markup=False, highlight=False, emoji=False, soft_wrap=True)


def _shorten(text: str, width: int = SUMMARY_WIDTH) -> str:
    text = text.replace("\n", " ").replace("\t", " ")
    return text if len(text) <= width else text[: width - 3] + "..."


def _summarize(block: Block) -> str:
    match block:
        case TableBlock():
            summary = f"{block.column_count} columns, {len(block.rows)} rows"
            return summary + " (investment)" if block.is_domain_special else summary
        case CodeBlock():
            return f"{block.language or 'code'}, {len(block.content.splitlines())} lines"
        case Heading():
            return f"h{block.level}: {_shorten(block.content)}"
        case ListRun():
            return f"{len(block.items)} {block.list_kind.value} items"
        case Rule():
            return ""
        case _:
            return _shorten(block.content)


@app.command()
def render(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="File holding one assistant reply"
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the HTML here instead of printing it"
    ),
    hooks: bool = typer.Option(
        False,
        "--hooks",
        help="Also list the interaction hooks"
    )
):
    """Render a reply to sanitized HTML."""
    settings = get_settings()
    rendered = get_renderer(settings).render(_read(file))

    if output:
        output.write_text(rendered.html, encoding="utf-8")
        console.print(f"[green]Wrote {len(rendered.html)} characters to {output}[/green]")
    else:
        _print_html(rendered.html)

    if hooks:
        table = Table(title="Interaction hooks")
        table.add_column("Action", style="cyan")
        table.add_column("Target", style="yellow")
        table.add_column("Payload", style="dim")
        for hook in rendered.hooks:
            table.add_row(hook.action.value, hook.target_id, _shorten(hook.payload or "", 40))
        console.print(table)


@app.command()
def blocks(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="File holding one assistant reply"
    )
):
    """Show how a reply is split into blocks."""
    settings = get_settings()
    renderer = get_renderer(settings)
    classified = renderer.classifier.classify(_read(file))

    table = Table(title=f"{len(classified)} blocks")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Summary")
    for position, block in enumerate(classified, start=1):
        table.add_row(str(position), block.kind, _summarize(block))
    console.print(table)


@app.command()
def play(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="File holding one assistant reply"
    ),
    query: str | None = typer.Option(
        None,
        "--query",
        "-q",
        help="User query shown before the reply"
    ),
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed for thinking phrases, dwell and jitter"
    ),
    instant: bool = typer.Option(
        False,
        "--instant",
        help="Skip the animation and show the reply at once"
    )
):
    """Play a reply with the thinking indicator and typing reveal."""
    settings = get_settings()
    text = _read(file)

    async def _play():
        done = asyncio.Event()
        with Live(console=console, refresh_per_second=20) as live:
            callback = LiveCallback(live, done)
            controller = get_controller(settings, AsyncioScheduler(), callback, seed)
            if query:
                controller.transcript.append(Message.from_user(query))
                console.print(f"[bold yellow]You:[/bold yellow] {query}")
            controller.play(text, query=query)
            if instant:
                controller.fast_forward()
            await done.wait()
        return callback.rendered

    try:
        rendered = asyncio.run(_play())
    except KeyboardInterrupt:
        console.print("\n[dim]Interrupted.[/dim]")
        raise typer.Exit(code=130)

    console.print("[bold green]Rendered:[/bold green]")
    _print_html(rendered.html)


@app.command()
def copy(
    file: Path = typer.Argument(
        ...,
        exists=True,
        file_okay=True,
        dir_okay=False,
        help="File holding one assistant reply"
    ),
    target_id: str = typer.Argument(..., help="Table or code id, as listed by render --hooks"),
    action: HookAction = typer.Option(
        HookAction.COPY,
        "--action",
        "-a",
        help="Which payload to copy (copy, share, download_csv)"
    )
):
    """Copy a table or code payload to the clipboard."""
    settings = get_settings()
    rendered = get_renderer(settings).render(_read(file))

    hook = rendered.find_hook(target_id, action)
    if hook is None or hook.payload is None:
        console.print(f"[red]Error: no {action.value} payload for {target_id}[/red]")
        raise typer.Exit(code=1)

    import pyperclip

    try:
        pyperclip.copy(hook.payload)
    except pyperclip.PyperclipException as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Copied {len(hook.payload)} characters from {target_id}[/green]")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
