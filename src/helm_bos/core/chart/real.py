"""Chart loader reading packaged charts (gzipped tarballs)."""

import hashlib
import logging
import tarfile
from pathlib import Path, PurePosixPath

import yaml

from helm_bos.core.chart.abc import ChartLoader
from helm_bos.core.chart.types import ChartMetadata
from helm_bos.core.errors import ChartLoadError
from helm_bos.core.yaml_io import load_yaml

logger = logging.getLogger(__name__)

CHART_FILE = "Chart.yaml"
_DIGEST_CHUNK_SIZE = 1024 * 1024


def _read_chart_yaml(archive: tarfile.TarFile, chart_path: Path) -> bytes:
    # Chart.yaml lives directly under the chart's top-level directory
    for member in archive.getmembers():
        parts = PurePosixPath(member.name).parts
        if len(parts) == 2 and parts[1] == CHART_FILE and member.isfile():
            extracted = archive.extractfile(member)
            if extracted is None:
                break
            return extracted.read()
    raise ChartLoadError(f"{chart_path}: {CHART_FILE} file is missing")


class TarballChartLoader(ChartLoader):
    """Production implementation reading <chart>/Chart.yaml from a .tgz archive."""

    def load(self, chart_path: Path) -> ChartMetadata:
        try:
            with tarfile.open(chart_path, mode="r:*") as archive:
                raw = _read_chart_yaml(archive, chart_path)
        except (OSError, tarfile.TarError) as e:
            raise ChartLoadError(f"{chart_path}: {e}") from e

        try:
            data = load_yaml(raw)
        except yaml.YAMLError as e:
            raise ChartLoadError(f"{chart_path}: invalid {CHART_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ChartLoadError(f"{chart_path}: {CHART_FILE} is not a mapping")

        fields = dict(data)
        name = fields.pop("name", None)
        version = fields.pop("version", None)
        if not name:
            raise ChartLoadError(f"{chart_path}: chart.metadata.name is required")
        if not version:
            raise ChartLoadError(f"{chart_path}: chart.metadata.version is required")

        logger.debug("chart loaded: %s-%s", name, version)
        return ChartMetadata(name=str(name), version=str(version), fields=fields)

    def digest(self, chart_path: Path) -> str:
        sha = hashlib.sha256()
        try:
            with chart_path.open("rb") as f:
                for chunk in iter(lambda: f.read(_DIGEST_CHUNK_SIZE), b""):
                    sha.update(chunk)
        except OSError as e:
            raise ChartLoadError(f"{chart_path}: {e}") from e
        return sha.hexdigest()
