"""Core logic for build: scan a media tree and write the gallery manifest."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

from gallery_manifest.build_manifest.assemble import render_records, render_urls, sort_entries, write_atomic
from gallery_manifest.build_manifest.discovery import walk_media_files
from gallery_manifest.build_manifest.pool import bounded_map
from gallery_manifest.models.manifest import (
    GalleryConfig,
    GalleryEntry,
    OutputFormat,
    ResolvedTimestamp,
    TimestampSource,
)
from gallery_manifest.timestamps.resolver import resolve_timestamp
from gallery_manifest.utils.paths import public_url

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of one manifest build."""
    output: Path
    output_format: OutputFormat
    count: int
    entries: List[GalleryEntry] = field(default_factory=list)
    source_counts: Counter = field(default_factory=Counter)
    skipped_dirs: List[Path] = field(default_factory=list)


def resolve_all(config: GalleryConfig, files: List[Path], console: Optional[Console] = None) -> List[ResolvedTimestamp]:
    """Resolve timestamps for ``files`` with at most ``config.concurrency`` in flight."""
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console or Console(stderr=True),
        transient=True,
    ) as progress:
        task = progress.add_task("Resolving timestamps...", total=len(files))
        return bounded_map(
            lambda path: resolve_timestamp(path, config.sources),
            files,
            limit=config.concurrency,
            fallback=lambda path, e: ResolvedTimestamp.unresolved(),
            on_result=lambda index, value: progress.advance(task),
        )


def build_gallery(config: GalleryConfig, console: Optional[Console] = None) -> BuildResult:
    """Discover, resolve, sort and write one gallery manifest.

    Raises:
        DiscoveryError: If the media tree cannot be walked. Nothing is written.
        SerializationError: If the manifest cannot be written.
    """
    discovery = walk_media_files(config.root, config.follow_symlinks, config.skip_unreadable)
    files = discovery.files
    urls = [public_url(path, config.root, config.base_url) for path in files]

    if config.output_format == OutputFormat.URLS:
        write_atomic(render_urls(urls), config.output)
        return BuildResult(
            output=config.output,
            output_format=config.output_format,
            count=len(urls),
            skipped_dirs=discovery.skipped,
        )

    resolved = resolve_all(config, files, console)
    entries = sort_entries(
        GalleryEntry(src=url, taken_at=stamp.taken_at, taken_at_source=stamp.source)
        for url, stamp in zip(urls, resolved)
    )
    counts = Counter({source: 0 for source in TimestampSource})
    counts.update(stamp.source for stamp in resolved)
    logger.info(", ".join(f"{source.value}: {counts[source]}" for source in TimestampSource))

    write_atomic(render_records(entries), config.output)
    return BuildResult(
        output=config.output,
        output_format=config.output_format,
        count=len(entries),
        entries=entries,
        source_counts=counts,
        skipped_dirs=discovery.skipped,
    )


def main(config: GalleryConfig) -> BuildResult:
    """Entry point called from cli.py."""
    return build_gallery(config)
