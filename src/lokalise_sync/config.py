"""Configuration schema for lokalise-sync."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lokalise_sync.common import LoggingConfig


class HttpConfig(BaseModel):
    """HTTP client settings."""

    model_config = ConfigDict(extra='forbid')

    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Timeout applied to the export request and the archive download"
    )


class ExportConfig(BaseModel):
    """What to export and where to put it."""

    model_config = ConfigDict(extra='forbid')

    destination: Optional[str] = Field(
        default=None,
        description="Existing directory the bundle is extracted into"
    )
    clean_destination: bool = Field(
        default=False,
        description="Remove everything in the destination before extracting"
    )
    languages: List[str] = Field(
        default_factory=list,
        description="Language ISO codes to export, empty exports all"
    )
    tags: List[str] = Field(
        default_factory=list,
        description="Include only the keys tagged with one of these tags"
    )
    include_comments: bool = Field(
        default=False,
        description="Include comments in exported files"
    )
    use_original: bool = Field(
        default=False,
        description="Use original filenames/formats (bundle structure is ignored then)"
    )
    extra_parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional export request parameters, applied last"
    )
    work_directory: str = Field(
        default="lokalisetmp",
        description="Scratch directory for the downloaded archive"
    )
    keep_temp_on_failure: bool = Field(
        default=False,
        description="Leave the downloaded archive behind when a run fails"
    )

    @field_validator('languages', 'tags', mode='before')
    @classmethod
    def split_comma_separated(cls, v: Any) -> Any:
        """Accept a single comma-separated string as a list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v


class LokaliseSyncConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra='forbid')

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)


class LokaliseCredentials(BaseSettings):
    """Lokalise credentials bound from LOKALISE_API_TOKEN and LOKALISE_PROJECT_ID."""

    api_token: str = ""
    project_id: str = ""

    model_config = SettingsConfigDict(
        env_prefix="LOKALISE_",
        extra="ignore",
    )
