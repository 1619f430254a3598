"""
Travel Crew Backend — Local Image Files Route
===============================================

What:  Serves images written by LocalAssetStore at the URLs it hands out.
When:  Only meaningful with ASSET_BACKEND=local; with a hosted asset store
       every request answers 404.
"""

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from travelcrew.exceptions import NotFoundError
from travelcrew.services.local_asset_service import LocalAssetStore

router = APIRouter(prefix="/api", tags=["Files"])


@router.get(
    "/files/{asset_path:path}",
    summary="Serve locally stored images",
    responses={200: {"description": "Image file"}, 404: {"description": "File not found"}},
)
async def serve_file(asset_path: str, request: Request) -> FileResponse:
    assets = request.app.state.asset_store
    if not isinstance(assets, LocalAssetStore):
        raise NotFoundError(resource="file", resource_id=asset_path)

    path = assets.find_file(asset_path)
    if path is None:
        raise NotFoundError(resource="file", resource_id=asset_path)

    # Media type is guessed from the file extension
    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
