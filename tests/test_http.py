"""Unit tests for proxy event parsing and response helpers."""

from __future__ import annotations

import base64
import json
import unittest

from backend.http import Request, RequestError, binary_response, json_response


class RequestFromEventTests(unittest.TestCase):
    def test_rest_api_event_with_stage_prefix(self) -> None:
        request = Request.from_event(
            {
                "httpMethod": "get",
                "path": "/dev/courses/",
                "requestContext": {"stage": "dev"},
                "headers": {"Authorization": "Bearer token-abc"},
                "queryStringParameters": {"activeOnly": "true"},
            }
        )

        self.assertEqual(request.method, "GET")
        self.assertEqual(request.path, "/courses")
        self.assertEqual(request.query_flag("activeOnly"), True)
        self.assertEqual(request.session_token(), "token-abc")

    def test_http_api_event_with_cookies(self) -> None:
        request = Request.from_event(
            {
                "rawPath": "/auth/session",
                "requestContext": {"http": {"method": "GET"}},
                "cookies": ["theme=dark", "session=cookie-token"],
            }
        )

        self.assertEqual(request.method, "GET")
        self.assertEqual(request.session_token(), "cookie-token")

    def test_bearer_header_wins_over_cookie(self) -> None:
        request = Request.from_event(
            {
                "httpMethod": "GET",
                "path": "/auth/session",
                "headers": {"authorization": "Bearer header-token", "Cookie": "session=cookie-token"},
            }
        )
        self.assertEqual(request.session_token(), "header-token")

    def test_missing_token_is_none(self) -> None:
        request = Request.from_event({"httpMethod": "GET", "path": "/courses"})
        self.assertIsNone(request.session_token())
        self.assertIsNone(request.query_flag("activeOnly"))

    def test_json_body_parsing(self) -> None:
        request = Request.from_event({"httpMethod": "POST", "path": "/contact", "body": '{"name": "Ada"}'})
        self.assertEqual(request.json_body(), {"name": "Ada"})

    def test_base64_body_is_decoded(self) -> None:
        body = base64.b64encode(b'{"name": "Ada"}').decode("ascii")
        request = Request.from_event(
            {"httpMethod": "POST", "path": "/contact", "body": body, "isBase64Encoded": True}
        )
        self.assertEqual(request.json_body(), {"name": "Ada"})

    def test_invalid_bodies_raise_request_error(self) -> None:
        for body in (None, "{not json", "[1, 2]"):
            with self.subTest(body=body):
                request = Request(method="POST", path="/contact", body=body)
                with self.assertRaises(RequestError):
                    request.json_body()


class ResponseTests(unittest.TestCase):
    def test_json_response_serializes_lists(self) -> None:
        response = json_response(200, [{"id": "a"}], headers={"X-Extra": "1"})
        self.assertEqual(json.loads(response["body"]), [{"id": "a"}])
        self.assertEqual(response["headers"]["Content-Type"], "application/json")
        self.assertEqual(response["headers"]["X-Extra"], "1")

    def test_binary_response_is_base64_encoded(self) -> None:
        response = binary_response(200, b"\x89PNG", content_type="image/png")
        self.assertTrue(response["isBase64Encoded"])
        self.assertEqual(base64.b64decode(response["body"]), b"\x89PNG")
        self.assertEqual(response["headers"]["Content-Length"], "4")


if __name__ == "__main__":
    unittest.main()
