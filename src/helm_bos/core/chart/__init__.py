"""Chart archive subpackage."""

from helm_bos.core.chart.abc import ChartLoader
from helm_bos.core.chart.fake import FakeChartLoader
from helm_bos.core.chart.real import TarballChartLoader
from helm_bos.core.chart.types import ChartMetadata

__all__ = [
    "ChartLoader",
    "ChartMetadata",
    "FakeChartLoader",
    "TarballChartLoader",
]
