"""
DSM Gateway — Product Service and /produtos Route Tests
=========================================================

What:  Tests for ProductService and the relational CRUD endpoints.
How:   Runs against a real SQLAlchemy session on a temporary SQLite file
       (conftest.sqlite_engine), so statements, row counts and commits are
       exercised for real. Driver failures use a mock session.

What we test:
    ✅ Create → 201 with the generated id; update echoes the new values
    ✅ Missing id → 404 and no row is touched
    ✅ Delete twice → 200 then 404
    ✅ SQLAlchemy errors become DatabaseError with the operation's message
    ✅ A failed commit turns the write into a 500; driver text never reaches the caller
"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.exc import OperationalError

from gateway.dependencies import get_db_session
from gateway.exceptions import DatabaseError, NotFoundError
from gateway.schemas.product import ProductIn
from gateway.services.product_service import ProductService


class TestProductService:
    """Service calls on a committed SQLite session."""

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_create_assigns_id(self, db_session):
        first = await self.service.create_product(db_session, ProductIn(nome="Caneta", preco=2.5))
        second = await self.service.create_product(db_session, ProductIn(nome="Lápis", preco=1.0))

        assert first.id is not None
        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_list_is_ordered_by_id(self, db_session):
        for nome in ("a", "b", "c"):
            await self.service.create_product(db_session, ProductIn(nome=nome, preco=1))

        products = await self.service.list_products(db_session)

        assert [p.nome for p in products] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await self.service.update_product(db_session, 999, ProductIn(nome="X", preco=1))

        assert exc_info.value.message == "Produto não encontrado"

    @pytest.mark.asyncio
    async def test_driver_error_keeps_operation_message(self):
        session = AsyncMock()
        session.execute = AsyncMock(
            side_effect=OperationalError("DELETE FROM produtos", {}, Exception("gone"))
        )

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.delete_product(session, 1)

        assert exc_info.value.message == "Erro ao deletar produto"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    @pytest.mark.asyncio
    async def test_flush_error_on_create(self):
        session = AsyncMock()
        session.add = MagicMock()
        session.flush = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("gone")))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_product(session, ProductIn(nome="X", preco=1))

        assert exc_info.value.message == "Erro ao criar produto"


class TestProductRoutes:
    """HTTP contract of /produtos."""

    @pytest.mark.asyncio
    async def test_create_then_update(self, test_client):
        created = await test_client.post("/produtos", json={"nome": "Caderno", "preco": 15.5})
        assert created.status_code == 201
        product_id = created.json()["id"]

        response = await test_client.put(
            f"/produtos/{product_id}", json={"nome": "X", "preco": 9.99}
        )

        assert response.status_code == 200
        assert response.json() == {"id": product_id, "nome": "X", "preco": 9.99}

        listed = await test_client.get("/produtos")
        assert listed.json() == [{"id": product_id, "nome": "X", "preco": 9.99}]

    @pytest.mark.asyncio
    async def test_update_missing_returns_404_and_mutates_nothing(self, test_client):
        created = await test_client.post("/produtos", json={"nome": "Caderno", "preco": 15.5})
        before = (await test_client.get("/produtos")).json()

        response = await test_client.put(
            f"/produtos/{created.json()['id'] + 1000}", json={"nome": "X", "preco": 1}
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Produto não encontrado"
        assert (await test_client.get("/produtos")).json() == before

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client):
        created = await test_client.post("/produtos", json={"nome": "Borracha", "preco": 0.5})
        product_id = created.json()["id"]

        first = await test_client.delete(f"/produtos/{product_id}")
        second = await test_client.delete(f"/produtos/{product_id}")

        assert first.status_code == 200
        assert first.json() == {"message": "Produto removido com sucesso"}
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_update_requires_both_fields(self, test_client):
        created = await test_client.post("/produtos", json={"nome": "Régua", "preco": 3})

        response = await test_client.put(f"/produtos/{created.json()['id']}", json={"nome": "Y"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/produtos")

        assert response.status_code == 200
        assert response.json() == []


def _failing_commit_session(error: Exception):
    """Session whose statements succeed and whose commit raises `error`."""
    session = AsyncMock()
    session.add = MagicMock()
    session.flush = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock(rowcount=1))
    session.commit = AsyncMock(side_effect=error)
    return session


class TestProductRouteFailures:
    """Driver failures on /produtos reach the caller as the static message."""

    def _use_session(self, app, session):
        async def override():
            yield session

        app.dependency_overrides[get_db_session] = override

    @pytest.mark.asyncio
    async def test_commit_failure_on_create_returns_500(self, app, test_client):
        session = _failing_commit_session(
            OperationalError("COMMIT", {}, Exception("lock wait timeout"))
        )
        self._use_session(app, session)

        response = await test_client.post("/produtos", json={"nome": "A", "preco": 1})

        assert response.status_code == 500
        assert response.json()["message"] == "Erro ao criar produto"
        assert "lock wait timeout" not in response.text
        session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_on_update_returns_500(self, app, test_client):
        session = _failing_commit_session(
            OperationalError("COMMIT", {}, Exception("lock wait timeout"))
        )
        self._use_session(app, session)

        response = await test_client.put("/produtos/1", json={"nome": "X", "preco": 9.99})

        assert response.status_code == 500
        assert response.json()["message"] == "Erro ao atualizar produto"

    @pytest.mark.asyncio
    async def test_commit_failure_on_delete_returns_500(self, app, test_client):
        session = _failing_commit_session(
            OperationalError("COMMIT", {}, Exception("lock wait timeout"))
        )
        self._use_session(app, session)

        response = await test_client.delete("/produtos/1")

        assert response.status_code == 500
        assert response.json()["message"] == "Erro ao deletar produto"

    @pytest.mark.asyncio
    async def test_list_failure_hides_driver_text(self, app, test_client):
        session = AsyncMock()
        session.execute = AsyncMock(
            side_effect=OperationalError(
                "SELECT produtos.id FROM produtos", {}, Exception("Access denied for user 'root'")
            )
        )
        self._use_session(app, session)

        response = await test_client.get("/produtos")

        assert response.status_code == 500
        assert response.json()["message"] == "Erro ao listar produtos"
        assert "Access denied" not in response.text
        assert "SELECT" not in response.text

    @pytest.mark.asyncio
    async def test_created_product_is_visible_to_next_request(self, test_client):
        created = await test_client.post("/produtos", json={"nome": "Cola", "preco": 4.2})

        listed = await test_client.get("/produtos")

        assert listed.json() == [created.json()]
