"""
DSM Gateway — User Request/Response Schemas
=============================================

What:  Pydantic models for the /usuarios contract.
How:   FastAPI validates request bodies against these models, serializes
       responses through them and feeds them into the generated docs.

The identifier is exposed as `_id` (the document store's own key). Pydantic
does not allow field names with a leading underscore, so the attribute is
`id` with an `_id` alias; FastAPI serializes responses by alias.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Body of POST /usuarios. Both fields are required."""
    nome: str = Field(description="Nome do usuário")
    email: str = Field(description="E-mail do usuário")


class UserUpdate(BaseModel):
    """
    Body of PUT /usuarios/{id}.

    Only the fields present in the request are written; absent fields keep
    their stored value.
    """
    nome: Optional[str] = Field(default=None, description="Novo nome")
    email: Optional[str] = Field(default=None, description="Novo e-mail")

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    id: str = Field(alias="_id", description="Identificador gerado pelo MongoDB")
    nome: Optional[str] = None
    email: Optional[str] = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "UserResponse":
        """Build a response from a raw MongoDB document (ObjectId → str)."""
        return cls(
            id=str(document["_id"]),
            nome=document.get("nome"),
            email=document.get("email"),
        )
