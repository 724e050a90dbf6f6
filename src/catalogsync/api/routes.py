"""HTTP routes for the verified content listing."""

from __future__ import annotations

from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from catalogsync.app import CatalogServices, list_verified_contents

log = getLogger(__name__)

NO_STORE_HEADERS = {"Cache-Control": "no-store, max-age=0"}

router = APIRouter()


def get_services(request: Request) -> CatalogServices:
    return request.app.state.services


@router.get("/contents")
async def list_contents(
    services: Annotated[CatalogServices, Depends(get_services)],
    shop_name: Annotated[str | None, Query(alias="shopName")] = None,
    access_token: Annotated[str | None, Query(alias="accessToken")] = None,
    pagination: Annotated[int, Query()] = 1,
    limit: Annotated[int, Query()] = 10,
) -> JSONResponse:
    if not shop_name or not shop_name.strip() or not access_token or not access_token.strip():
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required parameters: shopName and accessToken"},
        )
    if pagination < 1 or limit < 1:
        return JSONResponse(
            status_code=400,
            content={"error": "pagination and limit must be positive integers"},
        )

    page = await list_verified_contents(
        services,
        shop_name=shop_name.strip(),
        access_token=access_token.strip(),
        page=pagination,
        limit=limit,
    )
    return JSONResponse(content=page.to_payload(), headers=NO_STORE_HEADERS)


@router.get("/health")
async def health() -> JSONResponse:
    return JSONResponse(content={"status": "ok"}, headers=NO_STORE_HEADERS)
