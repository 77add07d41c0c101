import logging

from fastapi import APIRouter, HTTPException, Query

from grazer.config import Settings
from grazer.errors import InvalidPathError, PathNotFoundError, SourceParseError
from grazer.models import MetricsReport, MetricsRequest
from grazer.services import analysis
from grazer.services.filesystem import LocalFileSystem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/metrics", tags=["metrics"])

SETTINGS = Settings.from_env()


async def _measure(path: str) -> MetricsReport:
    try:
        return await analysis.analyze_path(path, LocalFileSystem.from_settings(SETTINGS))
    except PathNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPathError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SourceParseError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except OSError as e:
        logger.error("Error processing metrics request for %s", path, exc_info=e)
        raise HTTPException(status_code=500, detail=f"Failed to read {path}: {e}")


@router.post("", response_model=MetricsReport)
async def post_metrics(request: MetricsRequest):
    """
    Compute metrics for a file, or recursively for a directory.
    """
    return await _measure(request.path)


@router.get("", response_model=MetricsReport)
async def get_metrics(path: str = Query(..., min_length=1, description="File or directory to measure")):
    return await _measure(path)
