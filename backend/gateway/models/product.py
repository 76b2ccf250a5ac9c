"""
DSM Gateway — Product SQLAlchemy Model
========================================

What:  ORM model representing the `produtos` table in MySQL.
Who:   Used by ProductService for insert/select/update/delete.

Table layout (created outside this service; no migrations are shipped):
    id     INT PRIMARY KEY AUTO_INCREMENT
    nome   VARCHAR(255)
    preco  DECIMAL(10, 2)
"""

from typing import Optional

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from gateway.database import Base


class Product(Base):
    """A product row. Column names match the JSON contract (nome, preco)."""

    __tablename__ = "produtos"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    nome: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # asdecimal=False: rows come back as float, so JSON echoes 9.99 not "9.99"
    preco: Mapped[Optional[float]] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, nome='{self.nome}', preco={self.preco})>"
