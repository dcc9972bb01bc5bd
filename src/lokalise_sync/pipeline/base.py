"""Stage identifiers and per-run context."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class PipelineStage(str, Enum):
    """Pipeline stage identifiers."""

    EXPORT = "export"
    FETCH = "fetch"
    EXTRACT = "extract"


@dataclass
class PipelineContext:
    """Context shared by the stages of one run."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        """Add metadata to context."""
        self.metadata[key] = value

    def log_fields(self, stage: PipelineStage, **fields: Any) -> Dict[str, Any]:
        """Build ``extra`` for a log call made during ``stage``.

        Metadata gathered so far is included; ``fields`` win on key clashes.
        """
        return {
            "extra_fields": {
                "run_id": self.run_id,
                "stage": stage.value,
                **self.metadata,
                **fields,
            }
        }
