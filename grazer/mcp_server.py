import logging

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from grazer.config import Settings
from grazer.errors import GrazerError
from grazer.services import analysis
from grazer.services.filesystem import LocalFileSystem

logger = logging.getLogger(__name__)

mcp = FastMCP("grazer")

SETTINGS = Settings.from_env()


@mcp.tool()
async def calculate_metrics(path: str) -> str:
    """
    Calculate cyclomatic and cognitive complexity, nesting depth, Halstead
    measures, maintainability index and line/comment statistics for a file,
    or recursively for a folder. Returns the report as JSON.
    """
    try:
        report = await analysis.analyze_path(path, LocalFileSystem.from_settings(SETTINGS))
    except (GrazerError, OSError) as e:
        logger.error("calculate_metrics failed for %s", path, exc_info=e)
        raise ToolError(f"Error: {e}") from e
    return report.model_dump_json(by_alias=True, indent=2)


def run_stdio() -> None:
    logger.info("MCP metrics server running on stdio")
    mcp.run()
