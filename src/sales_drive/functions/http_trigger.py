"""HTTP trigger blueprint — health check, upload and file management endpoints."""

import json
import logging
from typing import Any

import azure.functions as func

from sales_drive import __version__
from sales_drive.config import load_config
from sales_drive.errors import StoreError, ValidationError
from sales_drive.orchestration.service import sales_file_service_from_config
from sales_drive.storage.uploader import UploadRequest

logger = logging.getLogger(__name__)

bp = func.Blueprint()

UPLOAD_FIELDS = ("monthNumber", "market", "country", "brand", "fromDate", "toDate")


def _json_response(payload: dict[str, Any], status_code: int) -> func.HttpResponse:
    body = json.dumps(payload)
    return func.HttpResponse(body, status_code=status_code, mimetype="application/json")


def _error_response(message: str, status_code: int) -> func.HttpResponse:
    return _json_response({"status": "error", "message": message}, status_code)


def _store_error_response(exc: StoreError) -> func.HttpResponse:
    return _json_response(
        {
            "status": "error",
            "message": str(exc),
            "operation": exc.operation,
            "target": exc.target,
        },
        502,
    )


@bp.route(route="health", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint. Returns service status and version."""
    logger.info("[health_check] health check requested")

    try:
        return _json_response({"status": "ok", "version": __version__}, 200)

    except Exception:
        logger.error("[health_check] health check failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="upload", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def upload_sales_file(req: func.HttpRequest) -> func.HttpResponse:
    """Upload a CSV sales file into root/Month/Market/Country.

    Expects multipart/form-data with a ``file`` part and the form fields
    monthNumber, market, country, brand, fromDate and toDate.
    """
    logger.info("[upload_sales_file] upload requested")

    upload = req.files.get("file")
    if upload is None:
        return _error_response("missing file", 400)
    missing = [name for name in UPLOAD_FIELDS if not req.form.get(name)]
    if missing:
        return _error_response(f"missing fields: {', '.join(missing)}", 400)

    request = UploadRequest(
        content=upload.stream,
        content_type=upload.content_type,
        original_filename=upload.filename,
        month_number=req.form["monthNumber"],
        market=req.form["market"],
        country=req.form["country"],
        brand=req.form["brand"],
        from_date=req.form["fromDate"],
        to_date=req.form["toDate"],
    )

    try:
        service = sales_file_service_from_config(load_config())
        file_id = service.upload(request)
        return _json_response({"status": "ok", "fileId": file_id}, 201)

    except ValidationError as exc:
        logger.info("[upload_sales_file] upload rejected; reason:%s", exc.reason)
        return _error_response(exc.reason, 400)
    except StoreError as exc:
        logger.error("[upload_sales_file] store failure; error:%s", exc, exc_info=True)
        return _store_error_response(exc)
    except Exception:
        logger.error("[upload_sales_file] upload failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="files", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def list_files(req: func.HttpRequest) -> func.HttpResponse:
    """List entries of a folder (``folderId`` query parameter, root folder by default)."""
    folder_id = req.params.get("folderId") or None
    logger.info("[list_files] listing requested; folder_id:%s", folder_id)

    try:
        service = sales_file_service_from_config(load_config())
        entries = service.list_files(folder_id)
        files = [entry.to_listing() for entry in entries]
        return _json_response({"status": "ok", "files": files}, 200)

    except StoreError as exc:
        logger.error("[list_files] store failure; error:%s", exc, exc_info=True)
        return _store_error_response(exc)
    except Exception:
        logger.error("[list_files] listing failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="files/{file_id}/content", methods=["GET"], auth_level=func.AuthLevel.FUNCTION)
def download_file(req: func.HttpRequest) -> func.HttpResponse:
    """Return the raw content of a file."""
    file_id = req.route_params.get("file_id", "")
    logger.info("[download_file] download requested; file_id:%s", file_id)

    try:
        service = sales_file_service_from_config(load_config())
        content = service.download(file_id)
        return func.HttpResponse(content, status_code=200, mimetype="application/octet-stream")

    except StoreError as exc:
        logger.error("[download_file] store failure; error:%s", exc, exc_info=True)
        return _store_error_response(exc)
    except Exception:
        logger.error("[download_file] download failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="files/{file_id}", methods=["PATCH"], auth_level=func.AuthLevel.FUNCTION)
def rename_file(req: func.HttpRequest) -> func.HttpResponse:
    """Rename a file. Body: ``{"name": "<new name>"}``."""
    file_id = req.route_params.get("file_id", "")
    logger.info("[rename_file] rename requested; file_id:%s", file_id)

    try:
        body = req.get_json()
    except ValueError:
        return _error_response("invalid JSON body", 400)
    new_name = body.get("name") if isinstance(body, dict) else None
    if not new_name:
        return _error_response("missing name", 400)

    try:
        service = sales_file_service_from_config(load_config())
        entry = service.rename(file_id, new_name)
        return _json_response({"status": "ok", "file": entry.to_listing()}, 200)

    except StoreError as exc:
        logger.error("[rename_file] store failure; error:%s", exc, exc_info=True)
        return _store_error_response(exc)
    except Exception:
        logger.error("[rename_file] rename failed", exc_info=True)
        return _error_response("Internal server error", 500)


@bp.route(route="files/{file_id}", methods=["DELETE"], auth_level=func.AuthLevel.FUNCTION)
def delete_file(req: func.HttpRequest) -> func.HttpResponse:
    """Delete a file."""
    file_id = req.route_params.get("file_id", "")
    logger.info("[delete_file] delete requested; file_id:%s", file_id)

    try:
        service = sales_file_service_from_config(load_config())
        service.delete(file_id)
        return func.HttpResponse(status_code=204)

    except StoreError as exc:
        logger.error("[delete_file] store failure; error:%s", exc, exc_info=True)
        return _store_error_response(exc)
    except Exception:
        logger.error("[delete_file] delete failed", exc_info=True)
        return _error_response("Internal server error", 500)
