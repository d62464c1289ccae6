"""Operator values for `webhook trigger`, kept in the OS keyring."""
from __future__ import annotations

from typing import Optional

import rich
import typer
from typing_extensions import Annotated

from ghost_bunny_purge.models.keyring_config import ConfigKey, KeyringConfig

app = typer.Typer(no_args_is_help=True)


@app.command(name="set")
def set_value(
    key: ConfigKey,
    value: Annotated[Optional[str], typer.Argument(help="Omit to clear")] = None,
):
    """Store a relay value (trigger token or relay url)."""
    with KeyringConfig.load_from_keyring() as cfg:
        if value:
            cfg[key] = value
        else:
            cfg.pop(key, None)

    action = "Stored" if value else "Cleared"
    rich.print(f"✅  {action} {key.value}")


@app.command()
def show():
    """Show stored relay values, secrets masked."""
    rich.print(KeyringConfig.load_from_keyring().to_display_json())
