"""
DSM Gateway — Product Route Handlers
======================================

What:  CRUD endpoints under /produtos backed by the MySQL table.
How:   Each handler receives a per-request AsyncSession (commit on success,
       rollback on error) and delegates to ProductService.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from gateway.dependencies import get_db_session
from gateway.request_log import log_info
from gateway.schemas.common import ErrorResponse, MessageResponse
from gateway.schemas.product import ProductIn, ProductResponse
from gateway.services.product_service import product_service

router = APIRouter(prefix="/produtos", tags=["Produtos"])

_NOT_FOUND = {404: {"description": "Produto não encontrado", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Erro interno", "model": ErrorResponse}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductResponse,
    responses={**_SERVER_ERROR},
    summary="Criar um novo produto",
)
async def create_product(
    request: Request,
    body: ProductIn,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.create_product(db, body)
    log_info("Produto criado", request, product)
    return product


@router.get(
    "",
    response_model=List[ProductResponse],
    responses={**_SERVER_ERROR},
    summary="Listar todos os produtos",
)
async def list_products(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> List[ProductResponse]:
    products = await product_service.list_products(db)
    log_info("Produtos listados", request, {"count": len(products)})
    return products


@router.put(
    "/{id}",
    response_model=ProductResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Atualizar um produto",
)
async def update_product(
    id: int,
    request: Request,
    body: ProductIn,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    product = await product_service.update_product(db, id, body)
    log_info("Produto atualizado", request, product)
    return product


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Deletar um produto",
)
async def delete_product(
    id: int,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    result = await product_service.delete_product(db, id)
    log_info("Produto removido", request, {"id": id})
    return MessageResponse(**result)
