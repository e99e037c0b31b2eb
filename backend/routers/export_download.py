import logging
import os
from datetime import date, datetime, timedelta
from io import BytesIO

import pytz
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from database import get_db
from crud import exports as exports_crud
from crud import tenant as tenant_crud
from models.users import User
from schemas.export_download import ExportDescriptorRequest, ExportDescriptorResponse
from utils.auth_utils import create_signed_token, decode_signed_token, get_current_db_user
from utils.export_utils import get_file_extension, get_mime_type_from_format, write_export
from utils.tenancy import get_tenant_id

router = APIRouter(
    prefix="/export-download",
    tags=["Export Download"],
)

logger = logging.getLogger("export_download")

EXPORT_TOKEN_AUDIENCE = "export-download"
EXPORT_TOKEN_TTL_SECONDS = int(os.getenv("EXPORT_TOKEN_TTL_SECONDS", "300"))


@router.post("/request", response_model=ExportDescriptorResponse)
def request_export(
    export_request: ExportDescriptorRequest,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: User = Depends(get_current_db_user)
):
    """
    Issues a short-lived download token describing the export.

    The token is passed to `GET /export-download` so a browser can fetch the
    file without sending headers.
    """
    if tenant_crud.get_tenant(db, tenant_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")

    try:
        mime_type = get_mime_type_from_format(export_request.export_format)
        extension = get_file_extension(export_request.export_format)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    file_name = (
        f"{export_request.export_type.value.lower()}_"
        f"{export_request.start_date.isoformat()}_{export_request.end_date.isoformat()}.{extension}"
    )
    expires_in = timedelta(seconds=EXPORT_TOKEN_TTL_SECONDS)
    expiration = datetime.now(pytz.utc) + expires_in

    token = create_signed_token(
        {
            "sub": user.id,
            "tenant_id": tenant_id,
            "export_type": export_request.export_type.value,
            "export_format": export_request.export_format.value,
            "start_date": export_request.start_date.isoformat(),
            "end_date": export_request.end_date.isoformat(),
            "file_name": file_name,
        },
        expires_in,
        audience=EXPORT_TOKEN_AUDIENCE
    )

    logger.info(f"Export {file_name} requested for tenant {tenant_id} by user {user.id}")
    return ExportDescriptorResponse(file_name=file_name, mime_type=mime_type, token=token, expiration=expiration)


@router.get("")
def download_export(token: str, db: Session = Depends(get_db)):
    claims = decode_signed_token(token, audience=EXPORT_TOKEN_AUDIENCE)
    # jose accepts tokens without an aud claim, so bearer tokens would pass too
    if claims.get("aud") != EXPORT_TOKEN_AUDIENCE:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not an export download token")

    try:
        table = exports_crud.build_export_table(
            db,
            claims["tenant_id"],
            claims["export_type"],
            date.fromisoformat(claims["start_date"]),
            date.fromisoformat(claims["end_date"]),
        )
        content = write_export(table, claims["export_format"])
        mime_type = get_mime_type_from_format(claims["export_format"])
        file_name = claims["file_name"]
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid export request: {e}")

    logger.info(f"Export {file_name} downloaded for tenant {claims['tenant_id']}")

    headers = {
        'Content-Disposition': f'attachment; filename="{file_name}"'
    }
    return StreamingResponse(BytesIO(content), media_type=mime_type, headers=headers)
