"""Settings resolution with named profiles and env overrides."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import tomlkit
import typer
from pydantic import SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

CONFIG_PATH = Path.home() / ".config" / "issuedraft" / "config.toml"


class IssueDraftSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ISSUEDRAFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_profile: str | None = None

    # Linear
    linear_api_key: SecretStr | None = None

    # Primary AI mode: local inference service (Ollama API)
    use_local_ai: bool = True
    ai_host: str = "http://localhost:11434"
    ai_model: str = "llama3.1"
    ai_creativity: float = 0.3

    # Alternate AI mode: OpenAI chat completions
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4.1-mini"
    openai_temperature: float = 0.2

    default_title: str = "AI generated issue"
    description_limit: int = 300
    http_timeout: float = 30.0

    log_level: str = "WARNING"
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Profile values arrive as init kwargs; env vars and .env must beat them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


@lru_cache(maxsize=1)
def _load_toml() -> tomlkit.TOMLDocument:
    """Load ~/.config/issuedraft/config.toml, returning empty document if missing."""
    if not CONFIG_PATH.exists():
        return tomlkit.document()
    return tomlkit.load(CONFIG_PATH.open())


def _list_profiles(config: Mapping) -> list[str]:
    # tomlkit Table implements MutableMapping but not dict, so check Mapping
    return [k for k, v in config.items() if isinstance(v, Mapping)]


def get_settings(profile: str | None = None) -> IssueDraftSettings:
    """Resolve the active profile and return a fully populated IssueDraftSettings.

    Precedence (highest to lowest):
    1. profile argument (--profile CLI flag)
    2. ISSUEDRAFT_DEFAULT_PROFILE env var
    3. default_profile key in ~/.config/issuedraft/config.toml
    4. First profile defined in ~/.config/issuedraft/config.toml
    """
    toml_config = _load_toml()

    active = (
        profile
        or os.environ.get("ISSUEDRAFT_DEFAULT_PROFILE")
        or toml_config.get("default_profile")
        or ((_profiles := _list_profiles(toml_config)) and _profiles[0] or None)
    )

    profile_defaults: dict = {}
    if active:
        if active in toml_config and isinstance(toml_config[active], Mapping):
            profile_defaults = dict(toml_config[active])
        elif active not in toml_config:
            profiles = _list_profiles(toml_config)
            typer.echo(f"Profile '{active}' not found in {CONFIG_PATH}. Available: {profiles or '(none)'}")
            raise typer.Exit(1)

    # env vars + .env always override profile defaults
    settings = IssueDraftSettings(**profile_defaults)

    if not settings.linear_api_key:
        typer.echo(
            "Missing Linear credentials. Set ISSUEDRAFT_LINEAR_API_KEY or "
            f"linear_api_key in the [{active or 'profile'}] section of {CONFIG_PATH}"
        )
        raise typer.Exit(1)

    return settings
