"""In-memory fake chart loader for testing."""

from pathlib import Path

from helm_bos.core.chart.abc import ChartLoader
from helm_bos.core.chart.types import ChartMetadata
from helm_bos.core.errors import ChartLoadError


class FakeChartLoader(ChartLoader):
    """Fake implementation returning pre-configured metadata and digests.

    All state is provided via constructor.
    """

    def __init__(
        self,
        *,
        charts: dict[Path, ChartMetadata] | None = None,
        digests: dict[Path, str] | None = None,
    ) -> None:
        """Create FakeChartLoader.

        Args:
            charts: Mapping of chart path -> metadata returned by load()
            digests: Mapping of chart path -> digest (defaults to "sha256-<file name>")
        """
        self._charts = charts or {}
        self._digests = digests or {}
        self._loaded: list[Path] = []

    @property
    def loaded(self) -> list[Path]:
        """Paths passed to load(), for test assertions."""
        return self._loaded

    def load(self, chart_path: Path) -> ChartMetadata:
        if chart_path not in self._charts:
            raise ChartLoadError(f"{chart_path}: no such file")
        self._loaded.append(chart_path)
        return self._charts[chart_path]

    def digest(self, chart_path: Path) -> str:
        return self._digests.get(chart_path, f"sha256-{chart_path.name}")
