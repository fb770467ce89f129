from pathlib import Path

from pydantic_settings import BaseSettings

from portfolio_intel.exceptions.custom import MissingCredentialError

GOOGLE_PLACEHOLDER = "your_google_places_api_key_here"
TRIPADVISOR_PLACEHOLDER = "your_tripadvisor_api_key_here"

DASHBOARD_DIR = Path(__file__).parent / "dashboard"


def is_configured(value: str | None, placeholder: str | None = None) -> bool:
    """A key counts as configured when it is set and not the .env.example placeholder."""
    if not value or not value.strip():
        return False
    return value.strip() != placeholder


def require_key(value: str | None, placeholder: str | None, name: str) -> str:
    if not is_configured(value, placeholder):
        raise MissingCredentialError(f"Missing {name} in environment")
    return value.strip()


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    google_places_api_key: str = ""
    tripadvisor_api_key: str = ""
    anthropic_api_key: str = ""

    github_token: str = ""
    github_repo: str = ""
    github_branch: str = "main"

    data_dir: Path = Path("data")
    properties_path: Path = Path("properties.json")
    folders_path: Path = Path("saved-portfolios.json")
    publish_dir: Path | None = None

    google_delay: float = 0.3
    tripadvisor_delay: float = 0.5
    rate_limit_cooldown: float = 10.0

    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 3737

    @property
    def has_google(self) -> bool:
        return is_configured(self.google_places_api_key, GOOGLE_PLACEHOLDER)

    @property
    def has_tripadvisor(self) -> bool:
        return is_configured(self.tripadvisor_api_key, TRIPADVISOR_PLACEHOLDER)

    @property
    def has_github(self) -> bool:
        return is_configured(self.github_token) and is_configured(self.github_repo)

    @property
    def has_llm(self) -> bool:
        return is_configured(self.anthropic_api_key)
