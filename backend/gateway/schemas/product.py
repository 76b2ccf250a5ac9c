"""
DSM Gateway — Product Request/Response Schemas
================================================

What:  Pydantic models for the /produtos contract.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ProductIn(BaseModel):
    """
    Body of POST /produtos and PUT /produtos/{id}.

    Both fields are required on both routes: an update always writes nome
    and preco together.
    """
    nome: str = Field(description="Nome do produto")
    preco: float = Field(description="Preço do produto")


class ProductResponse(BaseModel):
    id: int = Field(description="Identificador auto-incremento")
    nome: Optional[str] = None
    preco: Optional[float] = None

    model_config = {"from_attributes": True}
