"""
DSM Gateway — Product Service (relational store)
==================================================

What:  CRUD over the `produtos` table.
How:   SQLAlchemy Core/ORM statements executed on the request's AsyncSession.
       Every value reaches MySQL as a bound parameter. Update and delete
       report "not found" from the matched row count, so a missing id never
       mutates anything.
Who:   Called by the /produtos route handlers.

Transactions:
    Each write commits before returning, so a failed commit surfaces as
    DatabaseError (500) instead of a success response for a write that was
    rolled back. The session dependency still rolls back when the handler
    raises and returns the connection to the pool.
"""

import logging
from typing import Dict, List

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gateway.exceptions import DatabaseError, NotFoundError
from gateway.models.product import Product
from gateway.schemas.product import ProductIn, ProductResponse

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Produto não encontrado"


class ProductService:
    """
    Stateless operations on the products table.

    Each failure message below is also the public 500 message of its route.
    """

    async def create_product(self, db: AsyncSession, data: ProductIn) -> ProductResponse:
        product = Product(nome=data.nome, preco=data.preco)
        try:
            db.add(product)
            # flush emits the INSERT and populates the auto-increment id
            await db.flush()
            await db.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("Erro ao criar produto") from e

        logger.debug("Inserted product id=%s", product.id)
        return ProductResponse(id=product.id, nome=data.nome, preco=data.preco)

    async def list_products(self, db: AsyncSession) -> List[ProductResponse]:
        try:
            result = await db.execute(select(Product).order_by(Product.id))
            rows = result.scalars().all()
        except SQLAlchemyError as e:
            raise DatabaseError("Erro ao listar produtos") from e

        return [ProductResponse.model_validate(row) for row in rows]

    async def update_product(
        self, db: AsyncSession, product_id: int, data: ProductIn
    ) -> ProductResponse:
        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(nome=data.nome, preco=data.preco)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            matched = result.rowcount
            if matched:
                await db.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("Erro ao atualizar produto") from e

        if matched == 0:
            raise NotFoundError(PRODUCT_NOT_FOUND, resource="produto", resource_id=str(product_id))
        return ProductResponse(id=product_id, nome=data.nome, preco=data.preco)

    async def delete_product(self, db: AsyncSession, product_id: int) -> Dict[str, str]:
        stmt = (
            delete(Product)
            .where(Product.id == product_id)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(stmt)
            matched = result.rowcount
            if matched:
                await db.commit()
        except SQLAlchemyError as e:
            raise DatabaseError("Erro ao deletar produto") from e

        if matched == 0:
            raise NotFoundError(PRODUCT_NOT_FOUND, resource="produto", resource_id=str(product_id))
        return {"message": "Produto removido com sucesso"}


product_service = ProductService()
