"""Export options passed from the caller layer into the pipeline."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Tuple

from .errors import ConfigurationError


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    """Drop duplicates, keeping the first occurrence of each value."""
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class ExportOptions:
    """What to export from a Lokalise project.

    Attributes:
        api_token: Lokalise API token
        project_id: Lokalise project identifier
        languages: Language ISO codes to export; empty exports all
        tags: Only export keys carrying one of these tags; empty disables the filter
        include_comments: Include key comments in the exported files
        use_original_filenames: Use original filenames/formats (bundle structure is ignored then)
        extra_parameters: Raw request parameters merged last into the export request.
            No validation is done on them; they can override any built-in field.
    """

    api_token: str
    project_id: str
    languages: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
    include_comments: bool = False
    use_original_filenames: bool = False
    extra_parameters: Mapping[str, Any] = field(default_factory=dict)

    # extra_parameters values may be lists or dicts
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not isinstance(self.api_token, str) or not self.api_token.strip():
            raise ConfigurationError("No API token for Lokalise given")
        if not isinstance(self.project_id, str) or not self.project_id.strip():
            raise ConfigurationError("No project identifier for Lokalise given")

        for name in ("include_comments", "use_original_filenames"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} should be true or false", value=getattr(self, name))

        if isinstance(self.languages, str) or isinstance(self.tags, str):
            raise ConfigurationError("Languages and tags should be passed as sequences")

        languages = tuple(self.languages or ())
        tags = _unique(self.tags or ())
        for value in languages + tags:
            if not isinstance(value, str) or not value:
                raise ConfigurationError("Language codes and tags should be non-empty strings", value=value)

        if self.extra_parameters is None:
            object.__setattr__(self, "extra_parameters", {})
        if not isinstance(self.extra_parameters, Mapping):
            raise ConfigurationError("Additional parameters have to be a mapping")
        for key in self.extra_parameters:
            if not isinstance(key, str):
                raise ConfigurationError("Additional parameter names should be strings", key=key)

        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "languages", languages)
        object.__setattr__(self, "tags", tags)
        object.__setattr__(self, "extra_parameters", MappingProxyType(dict(self.extra_parameters)))

    def __repr__(self) -> str:
        return (
            f"ExportOptions(project_id={self.project_id!r}, languages={self.languages!r}, "
            f"tags={self.tags!r}, include_comments={self.include_comments}, "
            f"use_original_filenames={self.use_original_filenames}, "
            f"extra_parameters={dict(self.extra_parameters)!r})"
        )
