# app/routes.py
import json
import logging
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from importer import import_status, run_import, validate_companies
from importer.geocode import Geocoder

from .config import Settings, get_settings
from .gpt import CompletionClient
from .mongo import open_company_store
from .schemas import ImportRequest, apply_legacy_aliases

logger = logging.getLogger(__name__)

router = APIRouter()

SHARED_CACHE = "public, s-maxage=300, stale-while-revalidate=60"


def cors_headers(request: Request) -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": request.headers.get("origin") or "*",
        "Vary": "Origin",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization, x-client-request-id, x-session-id",
    }


def error_response(status_code: int, message: str, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


async def read_body(request: Request) -> object:
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return {}


def import_companies(settings: Settings, req: ImportRequest, session_id: Optional[str]):
    with CompletionClient(settings, timeout_ms=req.requested_timeout_ms) as completions, \
            Geocoder(settings.geocoding_api_key) as geocoder, \
            open_company_store(settings) as store:
        result = run_import(
            completions,
            geocoder,
            store,
            search=req.search_dict(),
            max_imports=req.maxImports,
            session_id=session_id,
        )
    return validate_companies(result.companies)


@router.api_route("/api/xai", methods=["GET", "POST", "OPTIONS"])
async def xai(request: Request, settings: Settings = Depends(get_settings)):
    cors = cors_headers(request)
    logger.info(f"xai invoked | method {request.method} | stub {settings.stub_mode}")

    if request.method == "OPTIONS":
        return Response(status_code=204, headers=cors)
    if request.method != "POST":
        return error_response(405, "Method Not Allowed", headers=cors)

    try:
        body = await read_body(request)
        if not isinstance(body, dict):
            return error_response(400, "Invalid request format: body must be a JSON object", headers=cors)

        try:
            req = ImportRequest.model_validate(apply_legacy_aliases(body))
        except ValidationError as e:
            return error_response(400, f"Invalid request format: {e}", headers=cors)

        session_id = req.session_id or request.headers.get("x-session-id")
        received = {"maxImports": req.maxImports, "search": req.search_dict()}

        if settings.stub_mode:
            companies = validate_companies([])
            return JSONResponse(
                {"companies": companies, "status": "stub", "meta": {"source": "stub", "received": received}},
                headers={**cors, "Cache-Control": "no-store"},
            )

        companies = await run_in_threadpool(import_companies, settings, req, session_id)
        logger.info(f"IMPORT SUCCESS: {len(companies)} unique companies via xAI")

        return JSONResponse(
            {
                "companies": companies,
                "status": import_status(len(companies), req.maxImports),
                "meta": {"source": "live", "received": {**received, "session_id": session_id}},
            },
            headers={**cors, "Cache-Control": SHARED_CACHE},
        )
    except Exception as e:
        logger.exception("xai unhandled error")
        return error_response(500, f"Server error: {e}", headers=cors)
