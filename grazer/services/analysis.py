import asyncio
import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence

from grazer.errors import GrazerError, InvalidPathError, PathNotFoundError
from grazer.models import HalsteadMetrics, MetricsReport
from grazer.services.analysis_types import ASTMetrics
from grazer.services.cognitive import analyze_cognitive_complexity
from grazer.services.filesystem import DirEntry, EntryKind, FileSystem, LocalFileSystem
from grazer.services.parsing import SourceParser, parser_for_path
from grazer.services.text_analysis import analyze_text, comment_syntax_for_path
from grazer.services.tree_sitter_analysis import analyze_structure

logger = logging.getLogger(__name__)

Parsers = Optional[Dict[str, SourceParser]]


def base_name(path: str) -> str:
    return os.path.basename(os.path.normpath(path))


def maintainability_index(volume: float, cyclomatic_complexity: int, loc: int) -> float:
    """
    MI = 171 - 5.2 * ln(V) - 0.23 * CC - 16.2 * ln(LOC), floored at zero.

    Volume and LOC are clamped to 1 first so empty input cannot reach ln(0).
    """
    mi = (
        171
        - 5.2 * math.log(max(1.0, volume))
        - 0.23 * cyclomatic_complexity
        - 16.2 * math.log(max(1, loc))
    )
    return max(0.0, mi)


def analyze_source(path: str, content: str, parsers: Parsers = None) -> ASTMetrics:
    """
    Run both tree passes when we have a grammar for the file's extension.

    Anything else gets neutral metrics. A parse failure on a recognized file
    propagates as SourceParseError.
    """
    parser = parser_for_path(path, parsers)
    if parser is None:
        return ASTMetrics.neutral()

    root = parser.parse(content, path)
    metrics = analyze_structure(root, parser.profile)
    metrics.cognitive_complexity = analyze_cognitive_complexity(root, parser.profile)
    return metrics


def compute_file_report(path: str, content: str, parsers: Parsers = None) -> MetricsReport:
    text_metrics = analyze_text(content, comment_syntax_for_path(path))
    ast_metrics = analyze_source(path, content, parsers)
    halstead = ast_metrics.halstead

    report = MetricsReport(
        kind="file",
        file_name=base_name(path),
        cyclomatic_complexity=ast_metrics.cyclomatic_complexity,
        cognitive_complexity=ast_metrics.cognitive_complexity,
        nesting_depth=ast_metrics.nesting_depth,
        fan_out=ast_metrics.fan_out,
        halstead=HalsteadMetrics(
            volume=halstead.volume,
            effort=halstead.effort,
            difficulty=halstead.difficulty,
            length=halstead.length,
            vocabulary=halstead.vocabulary,
        ),
        maintainability_index=maintainability_index(
            halstead.volume, ast_metrics.cyclomatic_complexity, text_metrics.loc
        ),
        loc=text_metrics.loc,
        sloc=text_metrics.sloc,
        comment_lines=text_metrics.comment_lines,
        comment_density=text_metrics.comment_density,
        character_count=len(content),
    )

    logger.info(
        "%s: Comp %d Cog %d MI %.2f",
        report.file_name,
        report.cyclomatic_complexity,
        report.cognitive_complexity,
        report.maintainability_index,
    )
    return report


@dataclass
class _Totals:
    count: int = 0
    cyclomatic_complexity: int = 0
    cognitive_complexity: int = 0
    nesting_depth: int = 0
    fan_out: int = 0
    loc: int = 0
    sloc: int = 0
    comment_lines: int = 0
    character_count: int = 0
    halstead_length: int = 0
    halstead_vocabulary: int = 0
    halstead_volume: float = 0.0
    halstead_effort: float = 0.0
    halstead_difficulty: float = 0.0
    maintainability_sum: float = 0.0

    def add(self, report: MetricsReport) -> None:
        self.count += 1

        # Sums
        self.cyclomatic_complexity += report.cyclomatic_complexity
        self.cognitive_complexity += report.cognitive_complexity
        self.fan_out += report.fan_out
        self.loc += report.loc
        self.sloc += report.sloc
        self.comment_lines += report.comment_lines
        self.character_count += report.character_count
        self.halstead_length += report.halstead.length
        self.halstead_vocabulary += report.halstead.vocabulary
        self.halstead_volume += report.halstead.volume
        self.halstead_effort += report.halstead.effort

        # Maxima
        self.nesting_depth = max(self.nesting_depth, report.nesting_depth)
        self.halstead_difficulty = max(self.halstead_difficulty, report.halstead.difficulty)

        self.maintainability_sum += report.maintainability_index

    def to_report(self, name: str) -> MetricsReport:
        return MetricsReport(
            kind="directory",
            file_name=name,
            cyclomatic_complexity=self.cyclomatic_complexity,
            cognitive_complexity=self.cognitive_complexity,
            nesting_depth=self.nesting_depth,
            fan_out=self.fan_out,
            halstead=HalsteadMetrics(
                volume=self.halstead_volume,
                effort=self.halstead_effort,
                difficulty=self.halstead_difficulty,
                length=self.halstead_length,
                vocabulary=self.halstead_vocabulary,
            ),
            maintainability_index=self.maintainability_sum / self.count if self.count else 0.0,
            loc=self.loc,
            sloc=self.sloc,
            comment_lines=self.comment_lines,
            # Recomputed from the totals, never averaged.
            comment_density=self.comment_lines / self.loc if self.loc > 0 else 0.0,
            character_count=self.character_count,
        )


def combine_reports(name: str, reports: Iterable[MetricsReport]) -> MetricsReport:
    """
    Fold the reports of a directory's direct children into one.

    An already-combined subdirectory report counts as a single child, which
    matters for the maintainability mean.
    """
    totals = _Totals()
    for report in reports:
        totals.add(report)
    return totals.to_report(name)


async def _analyze_child(
    path: str, kind: EntryKind, fs: FileSystem, parsers: Parsers
) -> Optional[MetricsReport]:
    try:
        if kind is EntryKind.DIRECTORY:
            entries = await fs.list_dir(path)
            return await compute_directory_report(path, entries, fs, parsers)
        content = await fs.read_text(path)
        return compute_file_report(path, content, parsers)
    except (OSError, GrazerError) as e:
        # One bad child must not sink its siblings.
        logger.warning("Skipping %s: %s", path, e)
        return None


async def compute_directory_report(
    path: str,
    entries: Sequence[DirEntry],
    fs: FileSystem,
    parsers: Parsers = None,
) -> MetricsReport:
    """
    Build the report for a directory whose listing is already known.

    Every file and subdirectory is analyzed concurrently; subdirectories list
    and recurse through `fs`. Other entry kinds are ignored.
    """
    children = [entry for entry in entries if entry.kind is not EntryKind.OTHER]
    results = await asyncio.gather(
        *(_analyze_child(os.path.join(path, entry.name), entry.kind, fs, parsers) for entry in children)
    )
    return combine_reports(base_name(path), (r for r in results if r is not None))


async def analyze_path(
    path: str,
    fs: Optional[FileSystem] = None,
    parsers: Parsers = None,
) -> MetricsReport:
    """
    Measure whatever lives at `path`.

    Errors for the requested path itself propagate: a missing path, something
    that is neither file nor directory, an unreadable file or directory, and a
    parse failure of the requested file.
    """
    fs = fs if fs is not None else LocalFileSystem()

    kind = await fs.stat_kind(path)
    if kind is None:
        raise PathNotFoundError(path)

    if kind is EntryKind.DIRECTORY:
        logger.info("Scanning directory %s", path)
        entries = await fs.list_dir(path)
        return await compute_directory_report(path, entries, fs, parsers)

    if kind is EntryKind.FILE:
        content = await fs.read_text(path)
        return compute_file_report(path, content, parsers)

    raise InvalidPathError(path)
