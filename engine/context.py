"""Mutable per-command state, passed explicitly instead of living in globals."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .environment import Environment

ENV_KEY = "gantry.env"
DEFAULT_ENV_KEY = "gantry.env.default"
CLI_ARGS_KEY = "gantry.cli.args"
INTERACTIVE_MODE_KEY = "gantry.interactive.mode"
STAGED_COMMAND_KEY = "gantry.script.name"


@dataclass
class CommandContext:
    """State one command may change and the next command must not see.

    Attributes:
        properties: -Dkey=value properties and other string settings
        environment: Environment pinned for the command (None = not pinned)
        default_env: Whether ``environment`` came from the default table
        cli_args: Trailing arguments, newline-joined ("" when absent)
        non_interactive: Set when ``--non-interactive`` was passed
        interactive_mode: Set while running inside the interactive loop
    """

    properties: dict[str, str] = field(default_factory=dict)
    environment: Environment | None = None
    default_env: bool = False
    cli_args: str = ""
    non_interactive: bool = False
    interactive_mode: bool = False

    @classmethod
    def from_environ(cls, environ: dict[str, str]) -> CommandContext:
        """Seed a context from the OS environment (``GANTRY_ENV`` pins an environment)."""
        context = cls()
        env_name = environ.get("GANTRY_ENV")
        if env_name:
            context.set_property(ENV_KEY, env_name)
        return context

    @property
    def is_env_pinned(self) -> bool:
        return self.environment is not None

    def set_property(self, key: str, value: str) -> None:
        self.properties[key] = value
        if key == ENV_KEY:
            self.environment = Environment.from_name(value) if value else None

    def get_property(self, key: str, default: str | None = None) -> str | None:
        return self.properties.get(key, default)

    def set_environment(self, environment: Environment, is_default: bool) -> None:
        self.environment = environment
        self.default_env = is_default
        self.properties[ENV_KEY] = environment.name
        self.properties[DEFAULT_ENV_KEY] = "true" if is_default else ""

    def clear_environment(self) -> None:
        self.environment = None
        self.default_env = False
        self.properties.pop(ENV_KEY, None)
        self.properties.pop(DEFAULT_ENV_KEY, None)

    def set_cli_args(self, args: str | None) -> None:
        # Newlines survive being embedded where whitespace is a separator
        self.cli_args = args.replace(" ", "\n") if args else ""
        self.properties[CLI_ARGS_KEY] = self.cli_args

    def snapshot(self) -> CommandContext:
        """Independent copy to restore from later."""
        return replace(self, properties=dict(self.properties))

    def restore(self, snapshot: CommandContext) -> None:
        """Reset every field to the values held by ``snapshot``."""
        self.properties = dict(snapshot.properties)
        self.environment = snapshot.environment
        self.default_env = snapshot.default_env
        self.cli_args = snapshot.cli_args
        self.non_interactive = snapshot.non_interactive
        self.interactive_mode = snapshot.interactive_mode
