from __future__ import annotations

import enum
import json

import keyring


class ConfigKey(enum.StrEnum):
    MANUAL_TRIGGER_TOKEN = "MANUAL_TRIGGER_TOKEN"
    RELAY_URL = "RELAY_URL"


# Values that are masked in `config show`
SECRET_KEYS = frozenset({ConfigKey.MANUAL_TRIGGER_TOKEN})


class KeyringConfig(dict[ConfigKey, str]):
    """Operator-side values kept in the OS keyring."""

    KR_SERVICE_NAME: str = "ghost-purge"
    KR_USERNAME: str = "config"

    def __enter__(self) -> KeyringConfig:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.save()

    @classmethod
    def load_from_keyring(cls) -> KeyringConfig:
        """Load the configuration from the keyring."""
        json_str = keyring.get_password(cls.KR_SERVICE_NAME, cls.KR_USERNAME)
        if json_str is None:
            return cls()
        return cls({ConfigKey(k): v for k, v in json.loads(json_str).items()})

    def get_with_prompt(self, key: ConfigKey) -> str:
        if self.get(key):
            return self[key]

        import rich
        import typer

        rich.print(f"[red]Error:[/red] Required config key '{key.value}' not set. "
                   f"Please run 'ghost-purge config set {key.value} {{value}}' to set it.")

        raise typer.Exit(1)

    def save(self):
        """Save the configuration to the keyring."""
        json_str = json.dumps({k.value: v for k, v in self.items()})
        keyring.set_password(self.KR_SERVICE_NAME, self.KR_USERNAME, json_str)

    def to_display_json(self) -> str:
        """Render the configuration with secrets masked."""
        result = {}
        for key in ConfigKey:
            if key not in self:
                result[key.value] = "(not set)"
            elif not self[key]:
                result[key.value] = ""
            elif key in SECRET_KEYS:
                result[key.value] = "********"
            else:
                result[key.value] = self[key]

        return json.dumps(result, indent=2)
