"""
DSM Gateway — User Service (document store)
=============================================

What:  CRUD over the `usuarios` MongoDB collection.
How:   Each operation is a single call on pymongo's async collection API.
       Missing documents raise NotFoundError; every driver failure
       (including a malformed ObjectId) is wrapped in DatabaseError with the
       static public message "Erro interno".
Who:   Called by the /usuarios route handlers, which pass the collection
       received through dependency injection.

Update semantics:
    PUT merges: only the fields present in the body are $set, so an absent
    field keeps its stored value. The document returned is the post-update
    state.
"""

import logging
from typing import Any, Dict, List

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from gateway.exceptions import DatabaseError, NotFoundError
from gateway.schemas.user import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "Usuário não encontrado"
INTERNAL_ERROR = "Erro interno"

# Driver failures plus the ObjectId parse errors raised before any I/O
STORE_ERRORS = (PyMongoError, InvalidId, TypeError)


class UserService:
    """
    Stateless operations on the users collection.

    Error Handling Strategy:
        NotFoundError propagates untouched. Anything raised by bson/pymongo is
        re-raised as DatabaseError; the original exception is chained as
        __cause__ so the exception handler can log it.
    """

    async def create_user(
        self, collection: AsyncCollection, data: UserCreate
    ) -> UserResponse:
        document: Dict[str, Any] = data.model_dump()
        try:
            result = await collection.insert_one(document)
        except STORE_ERRORS as e:
            raise DatabaseError(INTERNAL_ERROR, operation="Erro ao criar usuário") from e

        logger.debug("Inserted user %s", result.inserted_id)
        document["_id"] = result.inserted_id
        return UserResponse.from_document(document)

    async def list_users(self, collection: AsyncCollection) -> List[UserResponse]:
        try:
            documents = await collection.find().to_list(length=None)
        except STORE_ERRORS as e:
            raise DatabaseError(INTERNAL_ERROR, operation="Erro ao buscar usuários") from e

        return [UserResponse.from_document(doc) for doc in documents]

    async def get_user(self, collection: AsyncCollection, user_id: str) -> UserResponse:
        try:
            document = await collection.find_one({"_id": ObjectId(user_id)})
        except STORE_ERRORS as e:
            raise DatabaseError(INTERNAL_ERROR, operation="Erro ao buscar usuário") from e

        if document is None:
            raise NotFoundError(USER_NOT_FOUND, resource="usuario", resource_id=user_id)
        return UserResponse.from_document(document)

    async def update_user(
        self, collection: AsyncCollection, user_id: str, data: UserUpdate
    ) -> UserResponse:
        changes = data.changes()
        try:
            oid = ObjectId(user_id)
            if changes:
                document = await collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
            else:
                # An empty $set is rejected by the server; nothing to write
                document = await collection.find_one({"_id": oid})
        except STORE_ERRORS as e:
            raise DatabaseError(INTERNAL_ERROR, operation="Erro ao atualizar usuário") from e

        if document is None:
            raise NotFoundError(USER_NOT_FOUND, resource="usuario", resource_id=user_id)
        return UserResponse.from_document(document)

    async def delete_user(self, collection: AsyncCollection, user_id: str) -> Dict[str, str]:
        try:
            result = await collection.delete_one({"_id": ObjectId(user_id)})
        except STORE_ERRORS as e:
            raise DatabaseError(INTERNAL_ERROR, operation="Erro ao remover usuário") from e

        if result.deleted_count == 0:
            raise NotFoundError(USER_NOT_FOUND, resource="usuario", resource_id=user_id)
        return {"message": "Usuário removido com sucesso"}


# Stateless, shared by every request
user_service = UserService()
