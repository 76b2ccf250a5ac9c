"""
DSM Gateway — Bucket Route Handlers
=====================================

What:  Object-storage endpoints under /buckets: list, upload, delete, replicate.
How:   Plain `def` handlers; FastAPI runs them in its threadpool, so the
       blocking boto3 calls inside BucketService never stall the event loop.
       Failures surface as StorageError and reach the caller as
       {"error": <static message>, "details": <storage API error>}; a list
       failure returns the static message only.

Request Flow (upload):
    1. Client sends multipart/form-data with a `file` field
    2. No `file` field → 400 "Nenhum arquivo enviado." (storage untouched)
    3. The whole file is read into memory
    4. put_object under the file's original name
    5. 200 {"message", "result"}

Route order:
    /replicar/{fileName} is registered before /{bucketName}/upload so that
    POST /buckets/replicar/upload is a replication, not an upload into a
    bucket named "replicar".
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Path, Request, UploadFile

from gateway.dependencies import get_bucket_service
from gateway.exceptions import ValidationError
from gateway.request_log import log_info
from gateway.schemas.common import (
    ErrorResponse,
    MessageResponse,
    StorageErrorResponse,
    StorageResultResponse,
)
from gateway.services.bucket_service import BucketService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/buckets", tags=["Buckets"])

_STORAGE_ERROR = {500: {"description": "Erro na API de armazenamento", "model": StorageErrorResponse}}


@router.get(
    "",
    responses={**_STORAGE_ERROR},
    summary="Listar buckets S3",
    description="Retorna o array `Buckets` exatamente como a API de armazenamento informa.",
)
def list_buckets(
    request: Request,
    service: BucketService = Depends(get_bucket_service),
) -> List[Dict[str, Any]]:
    buckets = service.list_buckets()
    log_info("Buckets listados", request, buckets)
    return buckets


@router.post(
    "/replicar/{fileName}",
    response_model=StorageResultResponse,
    responses={**_STORAGE_ERROR},
    summary="Replicar arquivo de bucket principal para secundário",
    description=(
        "Copia o objeto do bucket de origem configurado para o bucket de destino "
        "configurado, com a mesma chave."
    ),
)
def replicate_file(
    request: Request,
    file_name: str = Path(alias="fileName"),
    service: BucketService = Depends(get_bucket_service),
) -> StorageResultResponse:
    result = service.replicate(file_name)
    log_info("Arquivo replicado com sucesso", request, result)
    return StorageResultResponse(message="Arquivo replicado com sucesso", result=result)


@router.post(
    "/{bucketName}/upload",
    response_model=StorageResultResponse,
    responses={
        400: {"description": "Nenhum arquivo enviado", "model": ErrorResponse},
        **_STORAGE_ERROR,
    },
    summary="Upload de arquivo para bucket",
)
def upload_file(
    request: Request,
    bucket_name: str = Path(alias="bucketName"),
    file: Optional[UploadFile] = File(default=None, description="Arquivo a enviar"),
    service: BucketService = Depends(get_bucket_service),
) -> StorageResultResponse:
    if file is None:
        raise ValidationError("Nenhum arquivo enviado.", field="file")

    try:
        # Buffered fully in memory; there is no streaming path
        body = file.file.read()
    finally:
        file.file.close()

    logger.info(
        "Received upload: bucket=%s, filename=%s, size=%d bytes",
        bucket_name,
        file.filename,
        len(body),
    )
    result = service.upload(bucket_name, file.filename or "", body)
    log_info("Upload efetuado", request, result)
    return StorageResultResponse(message="Arquivo enviado com sucesso!", result=result)


@router.delete(
    "/{bucketName}/file/{fileName}",
    response_model=MessageResponse,
    responses={**_STORAGE_ERROR},
    summary="Deletar arquivo de bucket",
)
def delete_file(
    request: Request,
    bucket_name: str = Path(alias="bucketName"),
    file_name: str = Path(alias="fileName"),
    service: BucketService = Depends(get_bucket_service),
) -> MessageResponse:
    service.delete_object(bucket_name, file_name)
    log_info("Objeto removido", request, {"bucketName": bucket_name, "fileName": file_name})
    return MessageResponse(message="Arquivo deletado com sucesso")
