from __future__ import annotations

from api_gateway.services.forwarding import LocalFault, Success, Unreachable, UpstreamError
from api_gateway.services.normalizer import GatewayResponse, normalize, relay


def test_upstream_error_keeps_status_and_backend_message() -> None:
    outcome = UpstreamError(status=404, body={"message": "User not found"})

    result = normalize(outcome, "User Service")

    assert result == GatewayResponse(
        status=404,
        body={"error": "User Service error", "message": "User not found", "status": 404},
    )


def test_upstream_error_without_message_uses_generic_text() -> None:
    for body in (None, "<html>oops</html>", {"detail": "nope"}, [1, 2]):
        result = normalize(UpstreamError(status=422, body=body), "Product Service")

        assert result.status == 422
        assert result.body["error"] == "Product Service error"
        assert result.body["message"] == "Request failed with status code 422"


def test_unreachable_is_503() -> None:
    result = normalize(Unreachable(detail="connection refused"), "Product Service")

    assert result == GatewayResponse(
        status=503,
        body={"error": "Product Service unavailable", "message": "Service is not responding"},
    )


def test_local_fault_is_500_gateway_error() -> None:
    result = normalize(LocalFault(message="bad request body"), "User Service")

    assert result == GatewayResponse(
        status=500,
        body={"error": "Gateway error", "message": "bad request body"},
    )


def test_relay_passes_success_through_unchanged() -> None:
    body = {"id": 42, "tags": ["a", "b"]}

    assert relay(Success(status=201, body=body), "User Service") == GatewayResponse(201, body)


def test_to_response_renders_json_or_empty() -> None:
    json_response = GatewayResponse(200, {"ok": True}).to_response()
    empty_response = GatewayResponse(204).to_response()

    assert json_response.status_code == 200
    assert json_response.body == b'{"ok":true}'
    assert empty_response.status_code == 204
    assert empty_response.body == b""


def test_non_string_message_is_not_stringified() -> None:
    for message in (42, ["a", "b"], {"field": "email"}):
        result = normalize(UpstreamError(status=400, body={"message": message}), "User Service")

        assert result.body["message"] == message
