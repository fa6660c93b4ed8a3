"""Configuration loaded from environment (.env) and defaults."""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Locate the project root .env file; works regardless of CWD
_THIS_DIR = Path(__file__).resolve().parent          # shipwright/
_PROJECT_ROOT = _THIS_DIR.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE) if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Generation backend used when a request does not name one: openai | claude | gemini
    shipwright_default_provider: str = "openai"

    # OpenAI Assistants
    openai_api_key: str | None = None
    assistant_id: str | None = Field(default=None, validation_alias=AliasChoices("openai_assistant_id", "assistant_id"))
    shipwright_poll_interval: float = 2.0
    shipwright_max_poll_attempts: int = 300

    # Anthropic
    anthropic_api_key: str | None = None
    shipwright_anthropic_model: str = "claude-3-5-sonnet-20240620"
    shipwright_anthropic_max_tokens: int = 4096

    # Google Gemini
    google_api_key: str | None = None
    shipwright_gemini_model: str = "gemini-2.0-flash"
    shipwright_gemini_timeout: float = 300.0

    # Vercel deployment. Deployment is skipped when unset.
    vercel_token: str | None = None

    # Where generated projects are written, one directory per job id
    shipwright_output_dir: str = "./generated_projects"

    # External process timeouts (seconds)
    shipwright_scaffold_timeout: int = 600
    shipwright_install_timeout: int = 600
    shipwright_build_timeout: int = 300
    shipwright_deploy_timeout: int = 600

    # Background job workers
    shipwright_max_workers: int = 4

    # Files at or above this size are listed but their contents are not captured
    shipwright_max_file_bytes: int = 1024 * 1024

    # CORS origins (comma-separated)
    cors_origins: str = "*"

    port: int = 3001

    @property
    def output_dir(self) -> Path:
        """Generated-projects directory as an absolute Path.

        Relative paths are resolved against the project root (not CWD).
        """
        p = Path(self.shipwright_output_dir)
        if not p.is_absolute():
            return (_PROJECT_ROOT / p).resolve()
        return p.resolve()

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def ensure_dirs(self) -> None:
        """Ensure the output directory exists."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


def get_settings() -> Settings:
    settings = Settings()
    settings.ensure_dirs()
    return settings
