"""Export → download → extract pipeline."""

from .base import PipelineContext, PipelineStage
from .runner import LocalizationPipeline, WorkingDirectory, archive_location, run_export

__all__ = [
    "LocalizationPipeline",
    "PipelineContext",
    "PipelineStage",
    "WorkingDirectory",
    "archive_location",
    "run_export",
]
