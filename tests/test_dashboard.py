from __future__ import annotations

import asyncio
from datetime import datetime

import httpx
from httpx import AsyncClient
from respx import MockRouter

from tests.conftest import PRODUCT_URL, USER_URL

USER_5 = f"{USER_URL}/api/users/5"
PRODUCTS = f"{PRODUCT_URL}/api/products"


async def test_dashboard_joins_user_and_product_count(client: AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.get(f"{USER_URL}/api/users/1").mock(
        return_value=httpx.Response(200, json={"id": 1, "name": "A"})
    )
    respx_mock.get(PRODUCTS).mock(return_value=httpx.Response(200, json=[{}, {}, {}]))

    response = await client.get("/api/users/1/dashboard")

    assert response.status_code == 200
    body = response.json()
    assert body["user"] == {"id": 1, "name": "A"}
    assert body["totalProducts"] == 3
    assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


async def test_product_service_down_fails_whole_dashboard(client: AsyncClient, respx_mock: MockRouter) -> None:
    user_route = respx_mock.get(USER_5).mock(
        return_value=httpx.Response(200, json={"id": 5, "name": "E"})
    )
    respx_mock.get(PRODUCTS).mock(side_effect=httpx.ConnectError("refused"))

    response = await client.get("/api/users/5/dashboard")

    assert user_route.called
    assert response.status_code == 503
    assert response.json() == {
        "error": "Aggregation unavailable",
        "message": "Service is not responding",
    }


async def test_missing_user_surfaces_user_service_status(client: AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.get(USER_5).mock(return_value=httpx.Response(404, json={"message": "User not found"}))
    respx_mock.get(PRODUCTS).mock(return_value=httpx.Response(200, json=[]))

    response = await client.get("/api/users/5/dashboard")

    assert response.status_code == 404
    assert response.json() == {
        "error": "Aggregation error",
        "message": "User not found",
        "status": 404,
    }


async def test_double_failure_reports_user_service_outcome(client: AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.get(USER_5).mock(return_value=httpx.Response(404, json={"message": "User not found"}))
    respx_mock.get(PRODUCTS).mock(side_effect=httpx.ConnectError("refused"))

    response = await client.get("/api/users/5/dashboard")

    assert response.status_code == 404
    assert response.json()["error"] == "Aggregation error"


async def test_non_list_product_body_is_gateway_error(client: AsyncClient, respx_mock: MockRouter) -> None:
    respx_mock.get(USER_5).mock(return_value=httpx.Response(200, json={"id": 5}))
    respx_mock.get(PRODUCTS).mock(return_value=httpx.Response(200, json={"items": []}))

    response = await client.get("/api/users/5/dashboard")

    assert response.status_code == 500
    assert response.json()["error"] == "Gateway error"


async def test_both_calls_start_before_either_finishes(client: AsyncClient, respx_mock: MockRouter) -> None:
    in_flight = 0
    peak = 0

    async def slow(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.05)
        in_flight -= 1
        payload = [] if request.url.host == "products.test" else {"id": 5}
        return httpx.Response(200, json=payload)

    respx_mock.get(USER_5).mock(side_effect=slow)
    respx_mock.get(PRODUCTS).mock(side_effect=slow)

    response = await client.get("/api/users/5/dashboard")

    assert response.status_code == 200
    assert peak == 2
