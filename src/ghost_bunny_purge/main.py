from ghost_bunny_purge import bunny, config, webhook
from ghost_bunny_purge.models.settings import load_settings
from ghost_bunny_purge.server import create_app
from ghost_bunny_purge.utils.log import configure_logging

from typing import Annotated, Optional

import typer
import uvicorn
from typer import Option

app = typer.Typer(no_args_is_help=True)
app.add_typer(bunny.app, name="bunny")
app.add_typer(webhook.app, name="webhook")
app.add_typer(config.app, name="config")


@app.callback()
def main(verbose: Annotated[bool, Option("--verbose", "-v", help="Debug logging")] = False):
    configure_logging(verbose)


@app.command()
def serve(
    host: Annotated[Optional[str], Option(help="Bind host")] = None,
    port: Annotated[Optional[int], Option(help="Bind port")] = None,
):
    """Run the purge relay webhook server."""
    settings = bunny.attempt(load_settings)
    if settings.purge_relay_verbose:
        configure_logging(verbose=True)
    uvicorn.run(
        create_app(settings),
        host=host or settings.purge_relay_host,
        port=port or settings.purge_relay_port,
        log_config=None,
    )
