"""Main CLI application using Typer."""
import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.table import Table

from ..config import GeminiModel
from ..orchestrator import ResponseOrchestrator
from ..transcript import Message, TranscriptStore
from .formatting import grounding_sources, save_image
from .providers import get_image_synthesizer, get_orchestrator, get_settings

load_dotenv()

app = typer.Typer(
    name="genzai",
    help="Chat with Gemini models and generate images from the terminal",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

EXIT_WORDS = ("exit", "quit", "q")


def configure_logging(level: str) -> None:
    """Route log records through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def common(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        envvar="GENZAI_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
):
    """GenzAI command line."""
    configure_logging(log_level)


def _print_result(message: Message, output_dir: Path) -> None:
    """Print what the live view does not show: image location and sources."""
    if message.image:
        try:
            path = save_image(message.image, output_dir)
            console.print(f"[green]Image saved to {path}[/green]")
        except (OSError, ValueError) as e:
            console.print(f"[red]Could not save image: {e}[/red]")

    sources = grounding_sources(message.grounding_metadata)
    if sources:
        console.print("[dim]Sources:[/dim]")
        for title, uri in sources:
            console.print(f"[dim]  - {title}: {uri}[/dim]")


async def _ask(orchestrator: ResponseOrchestrator, text: str, output_dir: Path) -> None:
    """Send one message and render the answer as it streams in."""
    with Live(Markdown(""), console=console, refresh_per_second=12) as live:
        def render(store: TranscriptStore) -> None:
            last = store.last
            if last is None:
                return
            if last.is_generating_image:
                live.update("[dim]Generating image...[/dim]")
            else:
                live.update(Markdown(last.text or "..."))

        unsubscribe = orchestrator.store.subscribe(render)
        try:
            message = await orchestrator.send_message(text)
        finally:
            unsubscribe()

    if message is not None:
        _print_result(message, output_dir)


@app.command()
def chat(
    model: GeminiModel = typer.Option(
        None,
        "--model",
        "-m",
        help="Model to start with (defaults to GENZAI_DEFAULT_MODEL)"
    ),
    output_dir: Path = typer.Option(
        Path("./genzai-images"),
        "--output-dir",
        "-o",
        help="Directory for generated images"
    )
):
    """Interactive chat mode."""
    async def _chat():
        settings = get_settings(console)
        orchestrator = get_orchestrator(settings)
        if model is not None:
            orchestrator.select_model(model)

        try:
            console.print("[bold magenta]GenzAI Interactive Chat[/bold magenta]")
            console.print("[dim]/new starts a new conversation, /model NAME switches model[/dim]")
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave[/dim]\n")

            while True:
                try:
                    current = orchestrator.state.selected_model
                    user_input = console.input(f"[bold yellow]You ({current.label}):[/bold yellow] ")
                    command = user_input.strip()

                    if not command:
                        continue

                    if command.lower() in EXIT_WORDS:
                        console.print("[dim]Goodbye![/dim]")
                        break

                    if command == "/new":
                        orchestrator.start_new_conversation()
                        console.print("[dim]Started a new conversation.[/dim]\n")
                        continue

                    if command.startswith("/model"):
                        name = command[len("/model"):].strip()
                        try:
                            orchestrator.select_model(GeminiModel(name))
                        except ValueError:
                            choices = ", ".join(m.value for m in GeminiModel)
                            console.print(f"[red]Unknown model '{name}'. Choose one of: {choices}[/red]")
                        continue

                    await _ask(orchestrator, user_input, output_dir)
                    console.print()

                except KeyboardInterrupt:
                    console.print("\n[dim]Goodbye![/dim]")
                    break
                except EOFError:
                    console.print("\n[dim]Goodbye![/dim]")
                    break
        finally:
            await orchestrator.close()

    asyncio.run(_chat())


@app.command()
def image(
    prompt: str = typer.Argument(..., help="What to draw"),
    output_dir: Path = typer.Option(
        Path("./genzai-images"),
        "--output-dir",
        "-o",
        help="Directory for the generated image"
    )
):
    """Generate a single image."""
    async def _image():
        settings = get_settings(console)
        orchestrator = get_orchestrator(settings)
        try:
            message = await orchestrator.send_message(prompt, model=GeminiModel.FLASH_IMAGE_2_5)
        finally:
            await orchestrator.close()

        if message is None or message.image is None:
            console.print(Markdown(message.text if message else "Nothing to draw."))
            raise typer.Exit(code=1)

        console.print(message.text)
        _print_result(message, output_dir)

    asyncio.run(_image())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on")
):
    """Run the image HTTP endpoint."""
    import uvicorn

    from ..api import create_app

    settings = get_settings(console)
    if settings.image_endpoint:
        console.print("[yellow]Warning: GENZAI_IMAGE_ENDPOINT is ignored by the server[/yellow]")
        settings = settings.model_copy(update={"image_endpoint": None})

    console.print(f"[dim]Serving POST /api/image on http://{host}:{port}[/dim]")
    uvicorn.run(create_app(get_image_synthesizer(settings)), host=host, port=port)


@app.command()
def models():
    """List the available model selections."""
    table = Table(title="Models")
    table.add_column("Identifier", style="cyan")
    table.add_column("Name")
    table.add_column("Mode")

    for model in GeminiModel:
        table.add_row(model.value, model.label, "image" if model.is_image_model else "text")

    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
