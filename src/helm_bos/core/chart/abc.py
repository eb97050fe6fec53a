"""Abstract interface for reading chart archives."""

from abc import ABC, abstractmethod
from pathlib import Path

from helm_bos.core.chart.types import ChartMetadata


class ChartLoader(ABC):
    """Abstract interface for chart archive access.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def load(self, chart_path: Path) -> ChartMetadata:
        """Read the chart's declared metadata.

        Args:
            chart_path: Local path of a packaged chart (.tgz)

        Returns:
            ChartMetadata with name, version and remaining fields

        Raises:
            ChartLoadError: If the archive is unreadable or has no valid Chart.yaml
        """
        ...

    @abstractmethod
    def digest(self, chart_path: Path) -> str:
        """Compute the content digest of the archive file.

        Args:
            chart_path: Local path of a packaged chart (.tgz)

        Returns:
            Hex-encoded SHA-256 of the file contents
        """
        ...
