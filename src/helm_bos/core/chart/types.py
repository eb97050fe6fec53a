"""Data types for chart archives."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ChartMetadata:
    """Metadata declared by a chart's Chart.yaml.

    Fields:
        name: Chart name
        version: Chart version (semantic version string)
        fields: Every other Chart.yaml field, copied verbatim
    """

    name: str
    version: str
    fields: dict[str, Any] = field(default_factory=dict)
