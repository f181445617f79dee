from __future__ import annotations

import pytest
import requests

from zarban.api.models import JwtResponse
from zarban.api.response import format_api_error, handle_api_response
from zarban.exceptions import (
    APIError,
    GenericAPIError,
    ResponseDecodeError,
    UnhandledAPIError,
    UserError,
)
from zarban.types import GenericErrorDetails, UnhandledErrorDetails, UserErrorDetails

from conftest import make_response

_USER_ERROR_BODY = {
    "messages": {
        "en-US": {
            "userMessage": "Insufficient collateral",
            "solutions": ["Deposit more collateral", "Borrow less"],
        },
        "fa-IR": {"userMessage": "وثیقه کافی نیست", "solutions": []},
    }
}


def test_success_response_is_decoded_into_type():
    response = make_response(200, {"token": "jwt-token"})

    result = handle_api_response(response, JwtResponse)

    assert result == JwtResponse(token="jwt-token")


def test_success_without_type_returns_payload():
    assert handle_api_response(make_response(201, {"ok": True})) == {"ok": True}
    assert handle_api_response(make_response(204)) is None


def test_malformed_success_body_is_a_decode_error():
    with pytest.raises(ResponseDecodeError) as excinfo:
        handle_api_response(make_response(200, b"<html>ok</html>"), JwtResponse)

    assert excinfo.value.status_code == 200
    assert "Failed to parse success response" in str(excinfo.value)


def test_success_body_missing_fields_is_a_decode_error():
    with pytest.raises(ResponseDecodeError):
        handle_api_response(make_response(200, {"unexpected": 1}), JwtResponse)


def test_user_error_preserves_every_locale():
    response = make_response(
        400,
        _USER_ERROR_BODY,
        headers={"X-Request-ID": "req-123"},
        url="https://testwapi.zarban.io/v2/loans/create",
    )

    with pytest.raises(UserError) as excinfo:
        handle_api_response(response)

    err = excinfo.value
    assert err.status_code == 400
    assert err.request_id == "req-123"
    assert err.path == "/v2/loans/create"
    assert err.method == "POST"
    assert isinstance(err.error_details, UserErrorDetails)
    assert set(err.error_details.messages) == {"en-US", "fa-IR"}
    assert err.error_details.messages["en-US"].solutions == [
        "Deposit more collateral",
        "Borrow less",
    ]
    assert err.is_client_error
    assert str(err).startswith("UserError[req-123]: status 400")


def test_generic_error_carries_message_and_reasons():
    response = make_response(500, {"msg": "Internal failure", "reasons": ["db timeout"]})

    with pytest.raises(GenericAPIError) as excinfo:
        handle_api_response(response)

    err = excinfo.value
    assert err.message == "Internal failure"
    assert err.error_details == GenericErrorDetails(msg="Internal failure", reasons=["db timeout"])
    assert err.is_server_error
    assert err.request_id is None


@pytest.mark.parametrize(
    "body",
    [b"<html>502 Bad Gateway</html>", b"", b'{"messages": {}}', b'{"msg": ""}', b"[1, 2]"],
)
def test_unrecognised_error_body_is_kept_verbatim(body):
    with pytest.raises(UnhandledAPIError) as excinfo:
        handle_api_response(make_response(502, body))

    assert excinfo.value.error_details == UnhandledErrorDetails(body=body.decode())
    assert excinfo.value.kind == "UnhandledError"


def test_error_without_request_has_no_metadata():
    response = requests.Response()
    response.status_code = 404
    response._content = b"not found"

    with pytest.raises(UnhandledAPIError) as excinfo:
        handle_api_response(response)

    assert excinfo.value.path is None
    assert excinfo.value.method is None
    assert excinfo.value.is_not_found


def _raise(response: requests.Response) -> APIError:
    with pytest.raises(APIError) as excinfo:
        handle_api_response(response)
    return excinfo.value


def test_format_user_error_report():
    err = _raise(
        make_response(
            422,
            _USER_ERROR_BODY,
            headers={"X-Request-ID": "abc"},
            url="https://testwapi.zarban.io/v2/loans/create",
        )
    )

    report = format_api_error(err)
    lines = report.splitlines()

    assert lines[:6] == [
        "API Error Report",
        "---------------",
        "Status:     422",
        "Request ID: abc",
        "Path:       POST /v2/loans/create",
        "Message:    User error",
    ]
    assert "User Error Details:" in lines
    assert "[en-US]" in lines
    assert "[fa-IR]" in lines
    assert "Message:   Insufficient collateral" in lines
    assert lines.count("Solutions:") == 1
    assert "- Borrow less" in lines
    assert report.endswith("\n")


def test_format_generic_error_report_with_context():
    err = _raise(make_response(500, {"msg": "Boom", "reasons": ["first", "second"]}))
    err.with_context("operation", "create loan")

    lines = format_api_error(err).splitlines()

    assert "Context:" in lines
    assert "- operation: create loan" in lines
    assert "Error Details:" in lines
    assert "Message: Boom" in lines
    assert lines[-3:] == ["Reasons:", "- first", "- second"]


def test_format_unhandled_error_report():
    err = _raise(make_response(503, b"upstream unavailable"))

    lines = format_api_error(err).splitlines()

    assert lines[-2:] == ["Raw Details:", "upstream unavailable"]
