"""Command line entry point: export Lokalise localizations into a directory."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .common import ConfigLoader, setup_logging
from .config import LokaliseCredentials, LokaliseSyncConfig
from .errors import ConfigurationError
from .options import ExportOptions
from .pipeline import run_export

APP_NAME = "lokalise-sync"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def parse_parameters(values: Sequence[str]) -> Dict[str, str]:
    """Parse repeated ``KEY=VALUE`` arguments.

    Raises:
        ConfigurationError: If a value has no ``=`` or an empty key
    """
    parameters: Dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Expected KEY=VALUE, got '{item}'", value=item)
        parameters[key.strip()] = value
    return parameters


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Download Lokalise localizations and extract them into a directory"
    )
    parser.add_argument("--api-token", help="Lokalise API token (default: $LOKALISE_API_TOKEN)")
    parser.add_argument("--project-id", help="Lokalise project ID (default: $LOKALISE_PROJECT_ID)")
    parser.add_argument("--destination", type=Path, help="Localization destination directory")
    parser.add_argument(
        "--clean-destination",
        action="store_true",
        default=None,
        help="Remove everything in the destination before extracting"
    )
    parser.add_argument(
        "--language",
        dest="languages",
        action="append",
        metavar="CODE",
        help="Language to download (repeatable, default: all)"
    )
    parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        metavar="TAG",
        help="Include only keys with this tag (repeatable)"
    )
    parser.add_argument(
        "--include-comments",
        action="store_true",
        default=None,
        help="Include comments in exported files"
    )
    parser.add_argument(
        "--use-original",
        action="store_true",
        default=None,
        help="Use original filenames/formats (bundle structure is ignored then)"
    )
    parser.add_argument(
        "--param",
        dest="params",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Additional export request parameter (repeatable, overrides built-in fields)"
    )
    parser.add_argument("--config", type=Path, help="Path to config file (TOML)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override configured log level"
    )
    return parser


def _pick(override, configured):
    return configured if override is None else override


def resolve_options(
    args: argparse.Namespace,
    config: LokaliseSyncConfig,
    credentials: LokaliseCredentials,
) -> ExportOptions:
    """Merge flags over config and environment into export options."""
    export = config.export
    extra = dict(export.extra_parameters)
    extra.update(parse_parameters(args.params))

    return ExportOptions(
        api_token=_pick(args.api_token, credentials.api_token),
        project_id=_pick(args.project_id, credentials.project_id),
        languages=tuple(_pick(args.languages, export.languages)),
        tags=tuple(_pick(args.tags, export.tags)),
        include_comments=_pick(args.include_comments, export.include_comments),
        use_original_filenames=_pick(args.use_original, export.use_original),
        extra_parameters=extra,
    )


def resolve_destination(args: argparse.Namespace, config: LokaliseSyncConfig) -> Path:
    """Return the destination directory.

    Raises:
        ConfigurationError: If no destination is given or it is not a directory
    """
    destination = args.destination
    if destination is None and config.export.destination:
        destination = Path(config.export.destination)
    if destination is None:
        raise ConfigurationError("Destination is required")
    if not destination.is_dir():
        raise ConfigurationError(
            f"Destination directory does not exist: {destination}",
            destination=str(destination),
        )
    return destination.resolve()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__package__ or __name__)

    try:
        config = ConfigLoader(app_name=APP_NAME, config_class=LokaliseSyncConfig).load(
            defaults_path=args.config
        )
    except (OSError, ValueError) as e:
        # pydantic.ValidationError and toml decode errors are ValueErrors
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG

    setup_logging(
        level=args.log_level or config.logging.level,
        format=config.logging.format,
        log_file=Path(config.logging.file) if config.logging.file else None,
    )

    try:
        options = resolve_options(args, config, LokaliseCredentials())
        destination = resolve_destination(args, config)
    except ConfigurationError as e:
        logger.error(e.message)
        return EXIT_CONFIG

    clean_first = _pick(args.clean_destination, config.export.clean_destination)

    try:
        result = run_export(
            options,
            destination,
            clean_first,
            timeout=config.http.timeout_seconds,
            work_dir=Path(config.export.work_directory),
            keep_temp_on_failure=config.export.keep_temp_on_failure,
        )
    except Exception:
        # Already reported by the pipeline
        return EXIT_FAILED

    print(result)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
