"""
Travel Crew Backend — Resource Route Factory
==============================================

What:  Builds the five CRUD endpoints for a resource kind.
How:   build_resource_router(kind) returns an APIRouter mounted at the kind's
       prefix. Handlers stay thin: parse the multipart form, run the image
       boundary check, delegate to the kind's ResourceService.

Endpoints (per kind):
    GET    {prefix}          → 200, list of documents
    GET    {prefix}/{id}     → 200 | 400 invalid id | 404
    POST   {prefix}          → 201 | 400 validation / missing image / upload rejected
    PUT    {prefix}/{id}     → 200 | 400 | 404 | 500 upload failed
    DELETE {prefix}/{id}     → 200 confirmation | 400 | 404

The identifier is declared as a plain string so malformed ids reach the
service and produce a 400 with the standard error body.
"""

import logging
from typing import Dict, List, Optional, Tuple

from fastapi import APIRouter, Request
from starlette.datastructures import UploadFile

from travelcrew.kinds import ResourceKind
from travelcrew.schemas.common import ErrorResponse, MessageResponse
from travelcrew.services.resource_service import ResourceService
from travelcrew.services.upload_service import ImagePayload

logger = logging.getLogger(__name__)

IMAGE_FIELD = "image"

ERROR_RESPONSES = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    404: {"description": "Not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


async def read_resource_form(request: Request) -> Tuple[Dict[str, str], Optional[ImagePayload]]:
    """
    Split a multipart body into text fields and the validated image.

    A file part with no filename and no content (an empty file input) counts
    as "no image supplied".
    """
    form = await request.form()
    fields = {
        key: value
        for key, value in form.multi_items()
        if key != IMAGE_FIELD and isinstance(value, str)
    }

    image: Optional[ImagePayload] = None
    upload = form.get(IMAGE_FIELD)
    if isinstance(upload, UploadFile) and (upload.filename or upload.size):
        image = await request.app.state.upload_validator.read(upload)
    return fields, image


def build_resource_router(kind: ResourceKind) -> APIRouter:
    """Create the router for one resource kind."""
    router = APIRouter(prefix=kind.prefix, tags=[kind.tag])
    plural = kind.folder

    def service_for(request: Request) -> ResourceService:
        return request.app.state.resource_services[kind.name]

    @router.get(
        "",
        response_model=List[kind.response_model],
        responses={500: ERROR_RESPONSES[500]},
        summary=f"List {plural}",
        name=f"list_{plural}",
    )
    async def list_documents(request: Request):
        return await service_for(request).list()

    @router.get(
        "/{document_id}",
        response_model=kind.response_model,
        responses=ERROR_RESPONSES,
        summary=f"Get one {kind.name}",
        name=f"get_{plural}",
    )
    async def get_document(document_id: str, request: Request):
        return await service_for(request).get(document_id)

    @router.post(
        "",
        status_code=201,
        response_model=kind.response_model,
        responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]},
        summary=f"Create a {kind.name}",
        description=(
            "Multipart form with the kind's text fields and a mandatory `image` "
            "file (image/*, max 5MB). List fields take comma-separated values."
        ),
        name=f"create_{plural}",
    )
    async def create_document(request: Request):
        fields, image = await read_resource_form(request)
        logger.info(
            "Create %s request: fields=%s, image=%s",
            kind.name,
            ",".join(sorted(fields)) or "-",
            f"{len(image.content)} bytes" if image else "none",
        )
        return await service_for(request).create(fields, image)

    @router.put(
        "/{document_id}",
        response_model=kind.response_model,
        responses=ERROR_RESPONSES,
        summary=f"Update a {kind.name}",
        description=(
            "Multipart form with any subset of fields. Omitted fields keep their "
            "value; blank required fields are rejected. An `image` file replaces "
            "the current image."
        ),
        name=f"update_{plural}",
    )
    async def update_document(document_id: str, request: Request):
        fields, image = await read_resource_form(request)
        return await service_for(request).update(document_id, fields, image)

    @router.delete(
        "/{document_id}",
        response_model=MessageResponse,
        responses=ERROR_RESPONSES,
        summary=f"Delete a {kind.name}",
        name=f"delete_{plural}",
    )
    async def delete_document(document_id: str, request: Request) -> MessageResponse:
        message = await service_for(request).delete(document_id)
        return MessageResponse(message=message)

    return router
