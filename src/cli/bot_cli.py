"""Typer CLI to serve the example Messenger bot.

Flags override the matching environment variables, which in turn override
``.env`` / ``.env.local``.
"""

import os

os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import typer

from src.config import get_settings

app = typer.Typer()


def _apply_overrides(
    verify_token: str | None, page_token: str | None, port: int | None
) -> None:
    """Export CLI flags as environment variables read by Settings."""
    overrides = {
        "FACEBOOK_VERIFY_TOKEN": verify_token,
        "FACEBOOK_PAGE_ACCESS_TOKEN": page_token,
        "PORT": str(port) if port is not None else None,
    }
    for key, value in overrides.items():
        if value is not None:
            os.environ[key] = value
    get_settings.cache_clear()


@app.command()
def serve(
    verify_token: str = typer.Option(
        None, "--verify-token", help="The token used to verify Facebook"
    ),
    page_token: str = typer.Option(
        None, "--page-token", help="The token used to act on behalf of the page"
    ),
    port: int = typer.Option(None, "--port", help="Port to listen on"),
    host: str = typer.Option("0.0.0.0", "--host", help="Interface to bind"),
):
    """Serve the Messenger bot."""
    import uvicorn

    _apply_overrides(verify_token, page_token, port)
    settings = get_settings()

    typer.echo(f"Serving messenger bot on {host}:{settings.port}")
    uvicorn.run("src.main:app", host=host, port=settings.port)


if __name__ == "__main__":
    app()
