"""Environment selection for commands."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Environment:
    """A named run environment (development, production, test or custom)."""

    name: str

    @classmethod
    def from_name(cls, name: str) -> Environment:
        """Return the canonical instance for ``name`` or an alias of one (``prod``),
        otherwise a custom environment.
        """
        name = name.strip()
        key = name.lower()
        return _CANONICAL.get(key) or ENV_ALIASES.get(key) or cls(name)

    def __str__(self) -> str:
        return self.name


DEVELOPMENT = Environment("development")
PRODUCTION = Environment("production")
TEST = Environment("test")

_CANONICAL: dict[str, Environment] = {env.name: env for env in (DEVELOPMENT, PRODUCTION, TEST)}

# Short tokens accepted in front of the command name
ENV_ALIASES: dict[str, Environment] = {
    "dev": DEVELOPMENT,
    "prod": PRODUCTION,
    "test": TEST,
}

# Scripts that run in a specific environment unless told otherwise
DEFAULT_ENVS: dict[str, Environment] = {
    "War": PRODUCTION,
    "TestApp": TEST,
    "RunWebtest": TEST,
}


def is_env_alias(token: str | None) -> bool:
    return token is not None and token in ENV_ALIASES


class EnvironmentResolver:
    """Pick the environment a command runs in.

    Precedence: an explicit alias token, then an environment already pinned
    for the process, then the per-script default table, then development.
    """

    def __init__(self, defaults: dict[str, Environment] | None = None) -> None:
        self.defaults = dict(DEFAULT_ENVS if defaults is None else defaults)

    def resolve(
        self,
        token: str | None,
        script_name: str,
        pinned: Environment | None = None,
    ) -> tuple[Environment, bool]:
        """Resolve the environment for one command.

        Args:
            token: Environment token typed before the command, if any
            script_name: Script name used for the default-table lookup
            pinned: Environment already pinned for this process, if any

        Returns:
            (environment, is_default) where is_default is True when neither an
            explicit token nor a pinned environment decided the result
        """
        if is_env_alias(token):
            return ENV_ALIASES[token], False
        if pinned is not None:
            return pinned, False
        return self.defaults.get(script_name, DEVELOPMENT), True
