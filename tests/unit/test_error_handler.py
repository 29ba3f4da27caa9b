"""Unit tests for the JSON error envelope."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from libs.common.error_handler import add_exception_handlers
from libs.common.errors import ConflictError, InsufficientStockError


def _app_raising(exc: Exception) -> FastAPI:
    app = FastAPI()
    add_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise exc

    return app


async def _get(app: FastAPI):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        return await ac.get("/boom")


@pytest.mark.asyncio
@pytest.mark.unit
async def test_details_are_merged_into_envelope():
    response = await _get(_app_raising(InsufficientStockError("Ghee 1L", 2, 5)))

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "message": 'Only 2 units of "Ghee 1L" available. Please update quantity.',
        "error": "validation",
        "available": 2,
        "requested": 5,
    }


@pytest.mark.asyncio
@pytest.mark.unit
async def test_details_cannot_overwrite_envelope_keys():
    exc = ConflictError(
        "Already taken",
        {"success": True, "message": "all good", "error": "none", "sku": "SALT"},
    )

    response = await _get(_app_raising(exc))

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "message": "Already taken",
        "error": "conflict",
        "sku": "SALT",
    }
