import json
from pathlib import Path

import anyio
import pytest
from mcp.server.fastmcp.exceptions import ToolError

from grazer import mcp_server


def test_calculate_metrics_returns_report_json(tmp_path: Path) -> None:
    source = tmp_path / "f.ts"
    source.write_text("import x from 'x';\nif (x) { x(); }\n", encoding="utf-8")

    payload = anyio.run(mcp_server.calculate_metrics, str(source))

    data = json.loads(payload)
    assert data["fileName"] == "f.ts"
    assert data["cyclomaticComplexity"] == 2
    assert data["fanOut"] == 1


def test_calculate_metrics_on_directory(tmp_path: Path) -> None:
    (tmp_path / "a.ts").write_text("if (a) {}\n", encoding="utf-8")
    (tmp_path / "b.ts").write_text("while (b) {}\n", encoding="utf-8")

    data = json.loads(anyio.run(mcp_server.calculate_metrics, str(tmp_path)))

    assert data["kind"] == "directory"
    assert data["cyclomaticComplexity"] == 4


def test_calculate_metrics_reports_errors(tmp_path: Path) -> None:
    missing = tmp_path / "missing.ts"

    with pytest.raises(ToolError) as excinfo:
        anyio.run(mcp_server.calculate_metrics, str(missing))

    assert str(excinfo.value) == f"Error: Path does not exist: {missing}"


def test_tool_is_registered() -> None:
    tools = anyio.run(mcp_server.mcp.list_tools)

    names = {tool.name for tool in tools}
    assert "calculate_metrics" in names
