"""
DSM Gateway — User Route Handlers
===================================

What:  CRUD endpoints under /usuarios backed by the MongoDB collection.
How:   Each handler takes the collection from gateway.dependencies, delegates
       to UserService and logs the outcome with log_info. Failures propagate
       as NotFoundError (404) or DatabaseError (500, static "Erro interno")
       to the global exception handlers.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from pymongo.asynchronous.collection import AsyncCollection

from gateway.dependencies import get_users_collection
from gateway.request_log import log_info
from gateway.schemas.common import ErrorResponse, MessageResponse
from gateway.schemas.user import UserCreate, UserResponse, UserUpdate
from gateway.services.user_service import user_service

router = APIRouter(prefix="/usuarios", tags=["CRUD MongoDb"])

_NOT_FOUND = {404: {"description": "Usuário não encontrado", "model": ErrorResponse}}
_SERVER_ERROR = {500: {"description": "Erro interno", "model": ErrorResponse}}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={**_SERVER_ERROR},
    summary="Criar um novo usuário",
)
async def create_user(
    request: Request,
    body: UserCreate,
    collection: AsyncCollection = Depends(get_users_collection),
) -> UserResponse:
    user = await user_service.create_user(collection, body)
    log_info("Usuário criado", request, user)
    return user


@router.get(
    "",
    response_model=List[UserResponse],
    responses={**_SERVER_ERROR},
    summary="Listar todos os usuários",
)
async def list_users(
    request: Request,
    collection: AsyncCollection = Depends(get_users_collection),
) -> List[UserResponse]:
    users = await user_service.list_users(collection)
    log_info("Usuários listados", request, {"count": len(users)})
    return users


@router.get(
    "/{id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Obter um usuário por ID",
)
async def get_user(
    id: str,
    request: Request,
    collection: AsyncCollection = Depends(get_users_collection),
) -> UserResponse:
    user = await user_service.get_user(collection, id)
    log_info("Usuário encontrado", request, user)
    return user


@router.put(
    "/{id}",
    response_model=UserResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Atualizar um usuário",
    description="Grava apenas os campos enviados; campos ausentes mantêm o valor atual.",
)
async def update_user(
    id: str,
    request: Request,
    body: UserUpdate,
    collection: AsyncCollection = Depends(get_users_collection),
) -> UserResponse:
    user = await user_service.update_user(collection, id, body)
    log_info("Usuário atualizado", request, user)
    return user


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={**_NOT_FOUND, **_SERVER_ERROR},
    summary="Deletar um usuário",
)
async def delete_user(
    id: str,
    request: Request,
    collection: AsyncCollection = Depends(get_users_collection),
) -> MessageResponse:
    result = await user_service.delete_user(collection, id)
    log_info("Usuário removido", request)
    return MessageResponse(**result)
