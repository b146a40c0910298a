import mimetypes

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import FileResponse, PlainTextResponse

from logger_config import get_logger

logger = get_logger()

router = APIRouter()


@router.get("/{artifact_path:path}")
async def download_artifact(artifact_path: str, request: Request):
    """Serve a stored artifact, with range and Last-Modified support."""
    storage_manager = request.app.state.storage_manager
    found = await storage_manager.open_artifact(f"/{artifact_path}")
    if found is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)

    file_path, stat_result = found
    content_type, _ = mimetypes.guess_type(file_path.name)
    return FileResponse(
        file_path,
        media_type=content_type or "application/octet-stream",
        stat_result=stat_result
    )


@router.put("/{artifact_path:path}")
async def upload_artifact(artifact_path: str, request: Request):
    """Store the request body as an artifact, streaming it to disk.

    Args:
        artifact_path: Request path below the repository root
    """
    storage_manager = request.app.state.storage_manager
    request_path = f"/{artifact_path}"
    logger.info(f"Receiving upload request for {request_path}")

    file_path = await storage_manager.artifact_path(request_path)
    size = await storage_manager.store_artifact(file_path, request.stream())

    logger.info(f"Upload complete for {request_path} ({size} bytes)")
    return PlainTextResponse("Upload complete", status_code=status.HTTP_200_OK)
