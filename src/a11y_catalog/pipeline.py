"""Run the index scan, page extraction, reconciliation and aggregation."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from .aggregate import Aggregation, CatalogAggregator
from .extractors import IndexDirectoryScanner, PageMetadataExtractor
from .reconcile import Reconciler
from .schema import Catalog, PageDescriptor, PageResult, RunSummary
from .utils.config import DEFAULT_CONFIG_NAME, AppConfig, load_config
from .utils.logging import get_logger
from .writer import CatalogWriter

LOGGER = get_logger(__name__)


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


@dataclass
class SyncConfig:
    """Configuration parameters for a single catalog run."""

    root: Path = Path(".")
    app: AppConfig = field(default_factory=AppConfig)
    generated_on: date = field(default_factory=today_utc)
    output_path: Optional[Path] = None

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    @classmethod
    def from_root(cls, root: Path, config_path: Optional[Path] = None, **kwargs: object) -> "SyncConfig":
        root = Path(root)
        app = load_config(config_path or root / DEFAULT_CONFIG_NAME)
        return cls(root=root, app=app, **kwargs)  # type: ignore[arg-type]

    @property
    def artifact_path(self) -> Path:
        return self.output_path or self.root / self.app.output_filename

    @property
    def index_path(self) -> Path:
        return self.root / self.app.index_filename


@dataclass
class SyncResult:
    catalog: Catalog
    summary: RunSummary
    results: List[PageResult]


class CatalogSync:
    """Build the catalog from an index document and the pages it lists."""

    def __init__(
        self,
        scanner: Optional[IndexDirectoryScanner] = None,
        extractor: Optional[PageMetadataExtractor] = None,
    ) -> None:
        self.scanner = scanner or IndexDirectoryScanner()
        self.extractor = extractor or PageMetadataExtractor()

    def process_page(self, descriptor: PageDescriptor, root: Path, reconciler: Reconciler) -> PageResult:
        metadata, problem = self.extractor.extract(descriptor, root)
        if metadata is None:
            return PageResult(descriptor=descriptor, diagnostics=[problem] if problem else [])
        entry, diagnostics = reconciler.reconcile(descriptor, metadata)
        LOGGER.info(
            "%s (%s cases)",
            descriptor.filename,
            entry.total_cases if entry.total_cases is not None else "?",
        )
        return PageResult(descriptor=descriptor, entry=entry, diagnostics=diagnostics)

    def build(self, config: SyncConfig) -> SyncResult:
        """Produce the catalog in memory; raises only for fatal index errors."""

        index = self.scanner.scan(config.index_path)
        reconciler = Reconciler(config.app.base_url)
        results = [self.process_page(descriptor, config.root, reconciler) for descriptor in index.descriptors]

        aggregation: Aggregation = CatalogAggregator(config.app).aggregate(results, config.generated_on)
        summary = RunSummary.from_catalog(aggregation.catalog)
        summary.pages_skipped = aggregation.skipped
        summary.diagnostics = [*index.diagnostics, *aggregation.diagnostics]
        return SyncResult(catalog=aggregation.catalog, summary=summary, results=results)

    def run(self, config: SyncConfig) -> SyncResult:
        """Build the catalog and replace the output artifact."""

        result = self.build(config)
        written = CatalogWriter(config.artifact_path).write(result.catalog)
        result.summary.output_path = str(written)
        return result
