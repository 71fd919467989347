"""End-to-end tests of an application rendering typed JSON responses."""

from collections.abc import Generator
from typing import Any

import orjson
import pytest
import pytest_check as check
from fastapi import FastAPI
from fastapi.responses import Response
from fastapi.testclient import TestClient
from pydantic import BaseModel

from safejson import (
    JSON_TYPE_INT,
    JSON_TYPE_STRING,
    RenderJSON,
    install,
    register_exception_handlers,
)

HELLO_WORLD = {"message": JSON_TYPE_STRING}
API_STATUS = {"status": JSON_TYPE_INT, "message": JSON_TYPE_STRING}


class Greeting(BaseModel):
    """Response model rendered through convert_blessed."""

    message: str


class Deflatable:
    """Object converted by the configured normalizer."""

    def __init__(self, message: str) -> None:
        self.message = message


def build_app(**overrides: Any) -> FastAPI:
    """Build an application with a representative set of routes."""
    app = FastAPI()
    install(app, **overrides)
    register_exception_handlers(app)

    @app.get("/")
    def hello(render_json: RenderJSON) -> Response:
        return render_json({"message": "HELLO!"}, HELLO_WORLD)

    @app.get("/status")
    def status(render_json: RenderJSON) -> Response:
        return render_json({"status": 200, "message": "ok"}, API_STATUS)

    @app.post("/created")
    def created(render_json: RenderJSON) -> Response:
        return render_json({"message": "a+b<c>"}, HELLO_WORLD, 201)

    @app.get("/strict")
    def strict(render_json: RenderJSON) -> Response:
        return render_json({"message": "hi", "extra": 1}, HELLO_WORLD)

    @app.get("/model")
    def model(render_json: RenderJSON) -> Response:
        return render_json(Greeting(message="HELLO"), HELLO_WORLD)

    @app.get("/object")
    def deflated(render_json: RenderJSON) -> Response:
        return render_json(Deflatable("HELLO"), HELLO_WORLD)

    return app


@pytest.fixture
def client() -> Generator[TestClient]:
    """Client for an application with default options.

    Yields:
        TestClient: The test client.
    """
    with TestClient(build_app()) as test_client:
        yield test_client


@pytest.mark.integration
class TestDefaultApplication:
    """Test responses under the default configuration."""

    def test_hello(self, client: TestClient) -> None:
        """Test body, status and every response header."""
        response = client.get("/")

        check.equal(response.status_code, 200)
        check.equal(response.content, b'{"message":"HELLO!"}')
        check.equal(response.headers["content-type"], "application/json; charset=utf-8")
        check.equal(response.headers["content-length"], "20")
        check.equal(response.headers["x-frame-options"], "DENY")
        check.equal(response.headers["x-content-type-options"], "nosniff")
        check.equal(response.headers["x-xss-protection"], "1; mode=block")
        check.equal(
            response.headers["strict-transport-security"], "max-age=631138519"
        )
        check.is_not_in("x-download-options", response.headers)
        check.is_not_in("x-api-status", response.headers)

    def test_status_code_and_escaping(self, client: TestClient) -> None:
        """Test a custom status and escaped trigger characters."""
        response = client.post("/created")

        assert response.status_code == 201
        assert response.content == b'{"message":"a\\u002bb\\u003cc\\u003e"}'
        assert response.json() == {"message": "a+b<c>"}

    def test_untyped_field_is_encoded(self, client: TestClient) -> None:
        """Test fields without a descriptor are inferred by default."""
        response = client.get("/strict")

        assert orjson.loads(response.content) == {"message": "hi", "extra": 1}

    def test_android_cookie_request_is_allowed_by_default(
        self, client: TestClient, android_headers: dict[str, str]
    ) -> None:
        """Test the hijacking defence is off unless enabled."""
        response = client.get("/", headers=android_headers)

        assert response.status_code == 200


@pytest.mark.integration
class TestConfiguredApplication:
    """Test responses under non-default options."""

    def test_api_status_header(self) -> None:
        """Test the status field is mirrored into X-API-Status."""
        with TestClient(build_app(status_code_field="status")) as client:
            response = client.get("/status")

        assert response.headers["x-api-status"] == "200"

    def test_require_types_turns_into_500(self) -> None:
        """Test strict encoding failures reach the error handler."""
        with TestClient(build_app(require_types=True)) as client:
            response = client.get("/strict")

        assert response.status_code == 500
        assert response.json()["error_code"] == "ENCODING_ERROR"
        assert response.json()["details"]["path"] == "$.extra"

    def test_hijacking_defence(self, android_headers: dict[str, str]) -> None:
        """Test the legacy browser request is refused while XHR is served."""
        app = build_app(defence_json_hijacking_for_legacy_browser=True)

        with TestClient(app) as client:
            rejected = client.get("/", headers=android_headers)
            allowed = client.get(
                "/", headers={**android_headers, "X-Requested-With": "XMLHttpRequest"}
            )

        assert rejected.status_code == 403
        assert rejected.text == "invalid JSON request"
        assert rejected.headers["content-type"] == "text/plain"
        assert allowed.status_code == 200

    def test_convert_blessed_model(self) -> None:
        """Test pydantic models render when convert_blessed is on."""
        with TestClient(build_app(convert_blessed=True)) as client:
            response = client.get("/model")

        assert response.content == b'{"message":"HELLO"}'

    def test_normalizer(self) -> None:
        """Test the configured normalizer converts custom objects."""
        app = build_app(unbless_object=lambda value, _: {"message": value.message})

        with TestClient(app) as client:
            response = client.get("/object")

        assert response.content == b'{"message":"HELLO"}'

    def test_canonical_with_disabled_headers(self) -> None:
        """Test canonical output and a disabled header section together."""
        app = build_app(canonical=True, secure_headers=None)

        with TestClient(app) as client:
            response = client.get("/status")

        assert response.content == b'{"message":"ok","status":200}'
        assert "x-frame-options" not in response.headers
