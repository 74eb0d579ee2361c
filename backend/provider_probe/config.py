"""Provider probe configuration.

Environment Variables:
    PROVIDER_PROBE_GEMINI_API_KEY: Gemini API key (GEMINI_API_KEY also accepted)
    PROVIDER_PROBE_GROQ_API_KEY: Groq API key (GROQ_API_KEY also accepted)
    PROVIDER_PROBE_TIMEOUT: Per-attempt timeout in seconds (default: 30)
    PROVIDER_PROBE_DEADLINE: Optional time budget in seconds for a whole provider run
    PROVIDER_PROBE_PROMPT: Prompt sent with generation candidates (default: "Hi")
    PROVIDER_PROBE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
    PROVIDER_PROBE_LOG_DIR: Log directory path (default: logs/)

Values are also read from a ``.env`` file in the working directory.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from provider_probe.models import ProviderConfig
from provider_probe.presets import PRESETS


class Settings(BaseSettings):
    """Probe settings.

    Settings use the PROVIDER_PROBE_ prefix. API keys additionally
    accept the plain vendor variable names so an existing ``.env``
    keeps working.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROVIDER_PROBE_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PROVIDER_PROBE_GEMINI_API_KEY", "GEMINI_API_KEY"),
        repr=False,
    )
    groq_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PROVIDER_PROBE_GROQ_API_KEY", "GROQ_API_KEY"),
        repr=False,
    )

    timeout: float = Field(default=30.0, gt=0, description="Per-attempt timeout in seconds")
    deadline: float | None = Field(
        default=None, gt=0, description="Time budget in seconds for one provider run"
    )
    prompt: str = Field(default="Hi", min_length=1, description="Prompt for generation calls")

    def credential_for(self, provider: str) -> str | None:
        """Return the API key for a provider or preset name."""
        preset = PRESETS.get(provider)
        vendor = preset.vendor if preset is not None else provider
        return getattr(self, f"{vendor}_api_key", None)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def build_provider_configs(
    settings: Settings,
    providers: list[str] | None = None,
) -> list[ProviderConfig]:
    """Build one ProviderConfig per requested preset.

    Args:
        settings: Loaded settings holding credentials and the prompt
        providers: Preset names in probe order (default: every preset)

    Raises:
        ValueError: If a requested preset does not exist
    """
    names = providers or list(PRESETS)
    unknown = [name for name in names if name not in PRESETS]
    if unknown:
        raise ValueError(
            f"Unknown provider(s): {', '.join(unknown)}. Available: {', '.join(PRESETS)}"
        )

    return [
        ProviderConfig(
            name=name,
            credential=settings.credential_for(name),
            candidates=PRESETS[name].candidates,
            prompt=settings.prompt,
        )
        for name in names
    ]
