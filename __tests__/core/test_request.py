from base64 import b64encode

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from ghent.core.exceptions import ClientError
from ghent.core.request import OAuthRequest, RequestProtocol, require_parameters


def _basic(username: str, password: str) -> str:
    return "Basic " + b64encode(f"{username}:{password}".encode()).decode()


def test_get_returns_parameter_value() -> None:
    request = OAuthRequest(params={"client_id": "c1", "scope": ""})

    assert request.get("client_id") == "c1"
    assert request.get("scope") is None
    assert request.get("missing") is None


def test_basic_credentials_are_decoded() -> None:
    request = OAuthRequest(authorization=_basic("c1", "s1"))

    assert request.has_authorization() is True
    assert request.basic_credentials() == ("c1", "s1")


def test_basic_credentials_are_form_url_decoded() -> None:
    request = OAuthRequest(authorization=_basic("my%20client", "p%3Ass"))
    assert request.basic_credentials() == ("my client", "p:ss")


def test_password_may_contain_colons() -> None:
    request = OAuthRequest(authorization=_basic("c1", "a:b:c"))
    assert request.basic_credentials() == ("c1", "a:b:c")


def test_non_basic_authorization_has_no_credentials() -> None:
    request = OAuthRequest(authorization="Bearer abc")

    assert request.has_authorization() is True
    assert request.basic_credentials() is None


def test_malformed_basic_header_has_no_credentials() -> None:
    assert OAuthRequest(authorization="Basic !!!not-base64").basic_credentials() is None
    assert OAuthRequest(authorization="Basic " + b64encode(b"no-colon").decode()).basic_credentials() is None
    assert OAuthRequest(authorization="Basic").basic_credentials() is None


def test_no_authorization() -> None:
    request = OAuthRequest()

    assert request.has_authorization() is False
    assert request.basic_credentials() is None


def test_satisfies_protocol() -> None:
    assert isinstance(OAuthRequest(), RequestProtocol)


def test_from_fastapi_merges_query_and_form() -> None:
    app = FastAPI()

    @app.post("/token", response_model=None)
    async def token(request: Request) -> dict[str, object]:
        oauth_request = await OAuthRequest.from_fastapi(request)
        return {
            "grant_type": oauth_request.get("grant_type"),
            "code": oauth_request.get("code"),
            "credentials": oauth_request.basic_credentials(),
        }

    with TestClient(app) as client:
        response = client.post(
            "/token?grant_type=authorization_code",
            data={"code": "abc"},
            headers={"Authorization": _basic("c1", "s1")},
        )

    assert response.status_code == 200
    assert response.json() == {"grant_type": "authorization_code", "code": "abc", "credentials": ["c1", "s1"]}


def test_from_fastapi_get_uses_query_only() -> None:
    app = FastAPI()

    @app.get("/authorize", response_model=None)
    async def authorize(request: Request) -> dict[str, object]:
        oauth_request = await OAuthRequest.from_fastapi(request)
        return {"client_id": oauth_request.get("client_id"), "authorized": oauth_request.has_authorization()}

    with TestClient(app) as client:
        response = client.get("/authorize", params={"client_id": "app"})

    assert response.json() == {"client_id": "app", "authorized": False}


def test_require_parameters_returns_typed_values() -> None:
    request = OAuthRequest(params={"client_id": "app", "redirect_uri": "https://app.example/cb"})
    assert require_parameters(request, ["redirect_uri", "client_id"]) == ["https://app.example/cb", "app"]


def test_require_parameters_treats_empty_as_missing() -> None:
    with pytest.raises(ClientError, match="missing parameter: client_id") as exc:
        require_parameters(OAuthRequest(params={"client_id": ""}), ["client_id"])

    assert exc.value.status_code == 400
