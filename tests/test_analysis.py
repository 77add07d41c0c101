import logging
import math

import pytest

from grazer.errors import SourceParseError
from grazer.models import HalsteadMetrics, MetricsReport
from grazer.services.analysis import compute_file_report, maintainability_index


SAMPLE = """import { log } from './log';

// Adds two numbers.
export function add(a: number, b: number): number {
  if (a > b) {
    return a + b;
  }
  return b + a;
}
"""


def test_file_report_combines_text_and_tree_metrics():
    report = compute_file_report("src/math/add.ts", SAMPLE)

    assert report.kind == "file"
    assert report.file_name == "add.ts"
    assert report.cyclomatic_complexity == 2
    assert report.cognitive_complexity == 2
    assert report.nesting_depth == 2
    assert report.fan_out == 1
    assert report.loc == 9
    assert report.comment_lines == 1
    assert report.sloc == 7
    assert report.comment_density == pytest.approx(1 / 9)
    assert report.character_count == len(SAMPLE)
    assert report.halstead.length > 0
    assert report.halstead.volume > 0
    assert 0 < report.maintainability_index <= 171


def test_character_count_is_code_points():
    content = "const s = 'héllo ✓';\n"
    assert compute_file_report("s.ts", content).character_count == len(content)


def test_non_code_file_gets_neutral_tree_metrics():
    content = "# Title\n\nSome text.\n"
    report = compute_file_report("docs/README.md", content)

    assert report.cyclomatic_complexity == 1
    assert report.cognitive_complexity == 0
    assert report.nesting_depth == 0
    assert report.fan_out == 0
    assert report.halstead == HalsteadMetrics()
    assert report.loc == 3
    assert report.character_count == len(content)
    assert report.maintainability_index == pytest.approx(maintainability_index(0.0, 1, 3))


def test_hash_comments_for_python_files():
    report = compute_file_report("tool.py", "# setup\nx = 1\n")

    assert report.comment_lines == 1
    assert report.sloc == 1
    # No grammar is registered for Python.
    assert report.cyclomatic_complexity == 1


def test_injected_registry_without_grammars():
    report = compute_file_report("index.ts", "if (a) { b(); }", parsers={})

    assert report.cyclomatic_complexity == 1
    assert report.halstead.length == 0
    assert report.loc == 1


def test_parse_error_propagates():
    with pytest.raises(SourceParseError):
        compute_file_report("broken.ts", "function f( {")


def test_maintainability_formula():
    expected = 171 - 5.2 * math.log(100.0) - 0.23 * 3 - 16.2 * math.log(20)
    assert maintainability_index(100.0, 3, 20) == pytest.approx(expected)


def test_maintainability_of_empty_input_is_finite():
    assert maintainability_index(0.0, 1, 0) == pytest.approx(171 - 0.23)

    report = compute_file_report("empty.ts", "")
    assert report.loc == 0
    assert report.maintainability_index == pytest.approx(171 - 0.23)
    assert report.comment_density == 0.0


def test_maintainability_is_clamped_at_zero():
    assert maintainability_index(1e9, 500, 100_000) == 0.0

    content = "x;\n" * 100_000
    report = compute_file_report("huge.ts", content)
    assert report.loc == 100_000
    assert report.maintainability_index == 0.0


def test_summary_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="grazer.services.analysis"):
        compute_file_report("src/add.ts", SAMPLE)

    assert "add.ts: Comp 2 Cog 2 MI" in caplog.text


def test_report_is_a_pure_function_of_input():
    first = compute_file_report("a/add.ts", SAMPLE)
    second = compute_file_report("b/add.ts", SAMPLE)

    assert first == second
    assert isinstance(first, MetricsReport)
