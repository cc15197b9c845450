"""Tests for the serverless (API Gateway proxy) entry point."""

import base64
import json
from unittest.mock import patch

import pytest

from waitlist import serverless
from waitlist.serverless import event_body, event_method, lambda_handler
from waitlist.signup import SignupHandler


def _v1_event(method="POST", body=None, b64=False):
    raw = json.dumps(body) if body is not None else None
    if raw is not None and b64:
        raw = base64.b64encode(raw.encode()).decode()
    return {"httpMethod": method, "body": raw, "isBase64Encoded": b64}


def _v2_event(method="POST", body=None):
    return {
        "requestContext": {"http": {"method": method}},
        "body": json.dumps(body) if body is not None else None,
    }


class TestEventParsing:
    def test_method_v1(self):
        assert event_method({"httpMethod": "post"}) == "POST"

    def test_method_v2(self):
        assert event_method(_v2_event("GET")) == "GET"

    def test_method_missing(self):
        assert event_method({}) == ""

    def test_body_json(self):
        assert event_body(_v1_event(body={"email": "a@b.co"})) == {"email": "a@b.co"}

    def test_body_already_decoded(self):
        assert event_body({"body": {"email": "a@b.co"}}) == {"email": "a@b.co"}

    def test_body_base64(self):
        assert event_body(_v1_event(body={"email": "a@b.co"}, b64=True)) == {"email": "a@b.co"}

    @pytest.mark.parametrize(
        "event",
        [
            {"body": None},
            {"body": "not json"},
            {"body": "%%%", "isBase64Encoded": True},
        ],
    )
    def test_body_invalid(self, event):
        assert event_body(event) is None


class TestLambdaHandler:
    """Full request cycle through the proxy adapter."""

    def test_success(self, handler, fake_store):
        response = lambda_handler(_v1_event(body={"email": "Foo@Bar.com"}), None, handler=handler)

        assert response["statusCode"] == 200
        assert response["headers"]["Content-Type"] == "application/json"
        assert response["headers"]["Access-Control-Allow-Origin"] == "*"
        body = json.loads(response["body"])
        assert body == {
            "success": True,
            "message": "Email added to waitlist",
            "insertedId": fake_store.documents[0]["_id"],
        }
        assert fake_store.documents[0]["email"] == "foo@bar.com"

    def test_http_api_v2_event(self, handler, fake_store):
        response = lambda_handler(_v2_event(body={"email": "a@b.co"}), None, handler=handler)
        assert response["statusCode"] == 200
        assert len(fake_store.documents) == 1

    def test_decoded_dict_body(self, handler, fake_store):
        event = {"httpMethod": "POST", "body": {"email": "Foo@Bar.com"}}

        response = lambda_handler(event, None, handler=handler)

        assert response["statusCode"] == 200
        assert fake_store.documents[0]["email"] == "foo@bar.com"

    def test_get_is_405(self, handler, fake_store):
        response = lambda_handler(_v1_event("GET"), None, handler=handler)

        assert response["statusCode"] == 405
        assert json.loads(response["body"]) == {
            "success": False,
            "message": "Method not allowed. Use POST.",
        }
        assert fake_store.insert_calls == 0

    def test_options_preflight(self, handler, fake_store):
        response = lambda_handler(_v1_event("OPTIONS"), None, handler=handler)

        assert response["statusCode"] == 204
        assert "POST" in response["headers"]["Access-Control-Allow-Methods"]
        assert fake_store.insert_calls == 0

    def test_invalid_email(self, handler):
        response = lambda_handler(_v1_event(body={"email": "not-an-email"}), None, handler=handler)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid email format"

    def test_store_unavailable(self, unavailable_store):
        response = lambda_handler(
            _v1_event(body={"email": "a@b.co"}), None, handler=SignupHandler(unavailable_store)
        )

        assert response["statusCode"] == 500
        assert json.loads(response["body"]) == {
            "success": False,
            "message": "Internal server error",
        }


class TestCachedHandler:
    """The handler is built once per function instance."""

    @pytest.fixture(autouse=True)
    def _reset(self, monkeypatch):
        monkeypatch.setattr(serverless, "_handler", None)

    def test_built_once(self, fake_store):
        with patch("waitlist.serverless.configure_logging"), patch(
            "waitlist.serverless.build_handler", return_value=SignupHandler(fake_store)
        ) as build:
            lambda_handler(_v1_event(body={"email": "a@b.co"}))
            lambda_handler(_v1_event(body={"email": "c@d.co"}))

        build.assert_called_once()
        assert len(fake_store.documents) == 2
