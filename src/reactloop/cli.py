"""CLI entry point for reactloop."""

from __future__ import annotations

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.markup import escape

from reactloop.agent import AgentLoop, AgentResult, RunOptions
from reactloop.config import ReactLoopConfig
from reactloop.errors import ConfigurationError
from reactloop.session.wire import EventType, Wire, WireEvent
from reactloop.tool import default_registry

app = typer.Typer(
    name="reactloop",
    help="A bounded reason/act/observe agent loop.",
    no_args_is_help=True,
)

DEFAULT_TASKS = [
    "What's the weather in New York?",
    "Calculate 125 * 37 - 42",
    "Find information about cooking pasta",
]


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def build_loop(config: ReactLoopConfig) -> AgentLoop:
    """Wire the built-in tools into a loop sized by ``config``."""
    registry = default_registry(delay=config.agent.tool_delay)
    return AgentLoop(registry, max_steps=config.agent.max_steps)


@app.command()
def run(
    tasks: list[str] | None = typer.Argument(
        None, help="Tasks to run, one after another. Defaults to three demo tasks."
    ),
    llm: bool = typer.Option(
        False, "--llm", "-l", help="Reason with the model instead of local rules."
    ),
    model: str | None = typer.Option(
        None, "--model", "-m", help="Model to use (litellm format, e.g. openai/gpt-4o)."
    ),
    base_url: str | None = typer.Option(
        None, "--base-url", help="API base URL for an OpenAI-compatible server."
    ),
    max_steps: int | None = typer.Option(
        None, "--max-steps", "-n", help="Step budget per task."
    ),
    tool_delay: float | None = typer.Option(
        None, "--tool-delay", help="Simulated tool latency in seconds."
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print results as JSON instead of a step trace."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    config_file: str | None = typer.Option(None, "--config", "-c", help="Config file path."),
) -> None:
    """Run the agent on one or more tasks."""
    setup_logging(verbose)

    try:
        config = ReactLoopConfig.load(config_file)
    except ValueError as e:
        typer.echo(f"Error: invalid configuration: {e}", err=True)
        raise typer.Exit(1)

    if llm:
        config.agent.use_model_reasoning = True
    if model:
        config.llm.model = model
    if base_url:
        config.llm.base_url = base_url
    if max_steps is not None:
        config.agent.max_steps = max_steps
    if tool_delay is not None:
        config.agent.tool_delay = tool_delay

    try:
        loop = build_loop(config)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    options = config.to_run_options()
    results = asyncio.run(_run_tasks(loop, tasks or DEFAULT_TASKS, options, trace=not as_json))

    if as_json:
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))


@app.command()
def tools() -> None:
    """List the actions the agent can take."""
    registry = default_registry(delay=0)
    typer.echo(registry.describe())


async def _run_tasks(
    loop: AgentLoop, tasks: list[str], options: RunOptions, trace: bool = True
) -> list[AgentResult]:
    """Run tasks sequentially, printing each run's trace from its own wire."""
    console = Console(highlight=False)
    results: list[AgentResult] = []

    for task in tasks:
        wire = Wire()
        consumer: asyncio.Task[None] | None = None
        if trace:
            console.rule(f'Running agent on task: "{escape(task)}"')
            consumer = asyncio.create_task(_render_queue(wire.subscribe(), console))

        result = await loop.run(task, options, wire=wire)
        results.append(result)

        if consumer is not None:
            await consumer
            console.print(f"\n[bold]Final result:[/bold] {escape(result.result)}")
            console.print(f"Completed in {result.steps} steps")

    return results


async def _render_queue(queue: asyncio.Queue[WireEvent | None], console: Console) -> None:
    while True:
        event = await queue.get()
        if event is None:
            break
        _render_event(event, console)


def _render_event(event: WireEvent, console: Console) -> None:
    d = event.data

    if event.type == EventType.RUN_BEGIN:
        console.print("[bold blue]\nReAct Agent Started[/bold blue]")
        console.print(f"[yellow]Task: {escape(d.get('task', ''))}[/yellow]")

    elif event.type == EventType.STEP_BEGIN:
        console.print(f"[cyan]\n--- Step {d.get('step', 0)} ---[/cyan]")

    elif event.type == EventType.FALLBACK:
        console.print("[dim]Model reasoning failed; using local rules.[/dim]")

    elif event.type == EventType.THOUGHT:
        console.print(f"[green]Thought: {escape(d.get('reasoning', ''))}[/green]")

    elif event.type == EventType.ACTION:
        console.print(
            f"[magenta]Action: {escape(d.get('action', '?'))} "
            f"({escape(d.get('input', ''))})[/magenta]"
        )

    elif event.type == EventType.OBSERVATION:
        console.print(f"[yellow]Observation: {escape(d.get('observation', ''))}[/yellow]")

    elif event.type == EventType.ERROR:
        console.print(f"[red]{escape(d.get('error', ''))}[/red]")

    elif event.type == EventType.COMPLETE:
        console.print("[bold blue]\nTask Complete[/bold blue]")

    elif event.type == EventType.EXHAUSTED:
        console.print("[bold red]\nMax steps reached without completing the task[/bold red]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
