"""
VideoAPI - CRUD Router Factory

Every resource is served by the same set of routes; only the resource
behind them changes. Resources are built per request from the caller's
claims so access policies can see who is asking.
"""
import logging
from typing import Awaitable, Callable, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse, Response

from app.crud.errors import CrudError, MissingResourceIdError, UnsupportedMethodError
from app.crud.filters import parse_list_query
from app.crud.resource import Resource
from app.services.auth import Claims, get_claims
from app.services.media import MediaService

logger = logging.getLogger(__name__)

ResourceFactory = Callable[[Claims], Resource]

REDIRECT_ON_ERROR = "redirectOnError"
REDIRECT_ON_SUCCESS = "redirectOnSuccess"


def error_url(target: str, message: str) -> str:
    """The redirect target with the error message appended as ?error=."""
    parts = urlsplit(target)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query.append(("error", message))
    return urlunsplit(parts._replace(query=urlencode(query)))


async def respond(request: Request, call: Callable[[], Awaitable[Optional[bytes]]]) -> Response:
    """
    Run an operation and turn its result into a response.

    Errors propagate to the application's error handler unless the request
    asked to be redirected on error.
    """
    try:
        body = await call()
    except CrudError as e:
        target = request.query_params.get(REDIRECT_ON_ERROR)
        if not target:
            raise
        logger.info(f"{request.method} {request.url.path} failed, redirecting: {e.message}")
        return RedirectResponse(error_url(target, e.message), status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    target = request.query_params.get(REDIRECT_ON_SUCCESS)
    if target:
        return RedirectResponse(target, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    if body is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return Response(content=body, media_type="application/json")


def build_crud_router(prefix: str, make_resource: ResourceFactory, media: Optional[MediaService] = None) -> APIRouter:
    """Routes for one resource: list, read, create, update, delete and, for media, upload."""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])

    @router.get("")
    async def list_resources(request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            query = parse_list_query(request.query_params.multi_items())
            return await make_resource(claims).get(
                query.filters, query.sort, query.ascending, query.offset, query.limit
            )
        return await respond(request, call)

    @router.get("/{resource_id}")
    async def get_resource(resource_id: str, request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            return await make_resource(claims).get_by_id(resource_id)
        return await respond(request, call)

    @router.post("")
    async def create_resource(request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            return await make_resource(claims).post(await request.body())
        return await respond(request, call)

    @router.post("/{resource_id}")
    async def upload_media(resource_id: str, request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            if media is None:
                raise UnsupportedMethodError()
            async with request.form() as form:
                return await media.upload(resource_id, form, claims)
        return await respond(request, call)

    @router.put("")
    @router.delete("")
    async def missing_id(request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            raise MissingResourceIdError()
        return await respond(request, call)

    @router.put("/{resource_id}")
    async def update_resource(resource_id: str, request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            return await make_resource(claims).put(resource_id, await request.body())
        return await respond(request, call)

    @router.delete("/{resource_id}")
    async def delete_resource(resource_id: str, request: Request, claims: Claims = Depends(get_claims)):
        async def call():
            if media is not None:
                media_only = request.query_params.get("mediaOnly") == "true"
                await media.delete(resource_id, media_only, claims)
                return None
            return await make_resource(claims).delete(resource_id)
        return await respond(request, call)

    return router
