# ABOUTME: Application configuration using Pydantic Settings for environment variables
# ABOUTME: Provides type-safe access to the wiki API, snapshot locations and logging settings

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TemplateTarget(BaseModel):
    """One infobox template and the snapshots its pages are stored in."""

    name: str
    template_title: str
    raw_snapshot: str
    parsed_snapshot: str


class Config(BaseSettings):
    """Application configuration with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="WIKI_INFOBOXES_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown environment variables
    )

    # Wiki API Configuration
    api_url: str = Field(default="https://en.wikipedia.org/w/api.php", description="MediaWiki API endpoint")
    user_agent: str = Field(
        default="wiki-infoboxes/0.1 (chemical identifier harvesting)",
        description="User-Agent header sent with every API request",
    )
    request_timeout: float | None = Field(
        default=None, description="Seconds before an API request times out (None waits indefinitely)"
    )

    # Template names for Wikipedia's Drugbox and Chembox infobox templates
    drugbox_template: str = Field(default="Template:Infobox drug")
    chembox_template: str = Field(default="Template:Chembox")

    # Snapshot locations
    raw_data_dir: Path = Field(default=Path("data/raw"), description="Folder for downloaded infobox HTML")
    parsed_data_dir: Path = Field(default=Path("data/parsed"), description="Folder for parsed identifiers")
    archive_dir: Path = Field(default=Path("data/archived"), description="Folder for superseded snapshots")

    drugbox_raw_file: str = Field(default="drugbox_raw_html.json")
    chembox_raw_file: str = Field(default="chembox_raw_html.json")
    drugbox_parsed_file: str = Field(default="drugbox_parsed_data.json")
    chembox_parsed_file: str = Field(default="chembox_parsed_data.json")

    # Logging Configuration
    log_mode: Literal["interactive", "production"] = Field(default="interactive", description="Logging output mode")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging verbosity level"
    )

    log_file: Path | None = Field(default=None, description="Custom log file path (overrides default)")

    def templates(self) -> list[TemplateTarget]:
        """Return the configured templates in the order they are processed."""
        return [
            TemplateTarget(
                name="drugbox",
                template_title=self.drugbox_template,
                raw_snapshot=self.drugbox_raw_file,
                parsed_snapshot=self.drugbox_parsed_file,
            ),
            TemplateTarget(
                name="chembox",
                template_title=self.chembox_template,
                raw_snapshot=self.chembox_raw_file,
                parsed_snapshot=self.chembox_parsed_file,
            ),
        ]

    def template(self, name: str) -> TemplateTarget:
        """Look up a template target by its short name."""
        for target in self.templates():
            if target.name == name:
                return target
        raise KeyError(f"Unknown template: {name}")


# Global config instance - lazy loaded when first accessed
_config_instance: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Creates the config on first access, subsequent calls return the same instance.

    Returns:
        Config: The application configuration instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance


def reload_config() -> Config:
    """Reload configuration from environment variables.

    Useful for testing or when environment variables change at runtime.

    Returns:
        Config: A fresh configuration instance
    """
    global _config_instance
    _config_instance = Config()
    return _config_instance
