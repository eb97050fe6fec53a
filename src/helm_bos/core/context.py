"""Application context with dependency injection."""

from dataclasses import dataclass, replace

from helm_bos.core.blob_store.abc import BlobStore
from helm_bos.core.blob_store.dry_run import DryRunBlobStore
from helm_bos.core.blob_store.real import BosBlobStore
from helm_bos.core.chart.abc import ChartLoader
from helm_bos.core.chart.real import TarballChartLoader
from helm_bos.core.global_config import (
    FilesystemGlobalConfigOps,
    GlobalConfig,
    GlobalConfigOps,
    apply_env_overrides,
)
from helm_bos.core.index_sync import IndexSync
from helm_bos.core.registry import HelmRepoRegistry, RepoRegistry
from helm_bos.core.time.abc import Time
from helm_bos.core.time.real import RealTime


@dataclass(frozen=True)
class HelmBosContext:
    """Immutable context holding all dependencies for helm-bos operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    blob_store: BlobStore
    chart_loader: ChartLoader
    registry: RepoRegistry
    time: Time
    global_config: GlobalConfig
    dry_run: bool

    def index_sync(self) -> IndexSync:
        """Build the index synchronization engine from this context."""
        return IndexSync(
            blob_store=self.blob_store,
            chart_loader=self.chart_loader,
            time=self.time,
            max_attempts=self.global_config.max_attempts,
        )

    @staticmethod
    def for_test(
        blob_store: BlobStore | None = None,
        chart_loader: ChartLoader | None = None,
        registry: RepoRegistry | None = None,
        time: Time | None = None,
        global_config: GlobalConfig | None = None,
        dry_run: bool = False,
    ) -> "HelmBosContext":
        """Create test context with optional pre-configured integration classes.

        Any unspecified integration is replaced by an empty fake.

        Example:
            >>> store = FakeBlobStore(objects={"bos://bucket/charts/index.yaml": b""})
            >>> ctx = HelmBosContext.for_test(blob_store=store)
        """
        from helm_bos.core.blob_store.fake import FakeBlobStore
        from helm_bos.core.chart.fake import FakeChartLoader
        from helm_bos.core.registry import InMemoryRepoRegistry
        from helm_bos.core.time.fake import FakeTime

        store: BlobStore = blob_store if blob_store is not None else FakeBlobStore()
        if dry_run:
            store = DryRunBlobStore(store)

        return HelmBosContext(
            blob_store=store,
            chart_loader=chart_loader if chart_loader is not None else FakeChartLoader(),
            registry=registry if registry is not None else InMemoryRepoRegistry(),
            time=time if time is not None else FakeTime(),
            global_config=global_config if global_config is not None else GlobalConfig(),
            dry_run=dry_run,
        )


def create_context(
    *,
    dry_run: bool,
    access_key: str | None = None,
    secret_key: str | None = None,
    endpoint: str | None = None,
    debug: bool = False,
    config_ops: GlobalConfigOps | None = None,
) -> HelmBosContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap the blob store so writes are printed, not executed
        access_key: BOS access key from the command line (overrides config)
        secret_key: BOS secret key from the command line (overrides config)
        endpoint: BOS endpoint from the command line (overrides config)
        debug: Enable debug output (in addition to config and environment)
        config_ops: Global config source (defaults to ~/.helm-bos/config.toml)

    Returns:
        HelmBosContext with real implementations
    """
    # 1. Load global config (file -> environment -> flags)
    ops = config_ops if config_ops is not None else FilesystemGlobalConfigOps()
    global_config = apply_env_overrides(ops.load_or_default())
    global_config = replace(
        global_config,
        access_key=access_key or global_config.access_key,
        secret_key=secret_key or global_config.secret_key,
        endpoint=endpoint or global_config.endpoint,
        debug=debug or global_config.debug,
    )

    # 2. Create integrations
    blob_store: BlobStore = BosBlobStore(
        access_key=global_config.access_key,
        secret_key=global_config.secret_key,
        endpoint=global_config.endpoint,
        region=global_config.region,
        conditional_writes=global_config.conditional_writes,
    )

    # 3. Apply dry-run wrapper if needed
    if dry_run:
        blob_store = DryRunBlobStore(blob_store)

    return HelmBosContext(
        blob_store=blob_store,
        chart_loader=TarballChartLoader(),
        registry=HelmRepoRegistry(),
        time=RealTime(),
        global_config=global_config,
        dry_run=dry_run,
    )
