"""Backend factory functions for CLI.

Centralizes creation of backends and the orchestrator from settings.
Hides configuration details from command implementations.
"""

from rich.console import Console

from ..backends import (
    ImageSynthesizer,
    create_image_synthesizer,
    create_prompt_enhancer,
    create_text_backend,
)
from ..config import Settings
from ..orchestrator import ResponseOrchestrator, SessionState

_console = Console()


def get_settings(console: Console | None = None) -> Settings:
    """Load settings and make sure an API key is present.

    Raises:
        SystemExit: If GEMINI_API_KEY is not set
    """
    import typer

    con = console or _console
    settings = Settings.from_env()
    if not settings.api_key:
        con.print("[red]Error: GEMINI_API_KEY not set in environment[/red]")
        raise typer.Exit(code=1)
    return settings


def get_image_synthesizer(settings: Settings) -> ImageSynthesizer:
    """Create the image synthesizer, preferring a configured HTTP endpoint.

    Environment variables:
        GENZAI_IMAGE_ENDPOINT: URL of an /api/image endpoint (optional)
        GENZAI_IMAGE_MODEL: Image model for direct SDK access
    """
    if settings.image_endpoint:
        return create_image_synthesizer("http", endpoint=settings.image_endpoint)
    return create_image_synthesizer("gemini", api_key=settings.api_key, model=settings.image_model)


def get_orchestrator(settings: Settings, state: SessionState | None = None) -> ResponseOrchestrator:
    """Wire backends into a ResponseOrchestrator."""
    return ResponseOrchestrator(
        text_backend=create_text_backend(
            "gemini",
            api_key=settings.api_key,
            enable_search=settings.enable_search,
        ),
        image_synthesizer=get_image_synthesizer(settings),
        enhancer=create_prompt_enhancer(
            "gemini",
            api_key=settings.api_key,
            model=settings.enhancer_model,
        ),
        state=state or SessionState(selected_model=settings.default_model),
    )
