"""API Gateway proxy event parsing and response helpers."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from werkzeug.http import parse_cookie

from backoffice.sessions.model import SessionRecord

SESSION_COOKIE = "session"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class RequestError(ValueError):
    """Raised when a request is malformed before any domain validation."""


def json_response(
    status_code: int,
    payload: Any,
    *,
    headers: Mapping[str, str] | None = None,
) -> Dict[str, Any]:
    merged = {"Content-Type": "application/json"}
    if headers:
        merged.update(headers)
    return {
        "statusCode": status_code,
        "headers": merged,
        "body": json.dumps(payload),
    }


def error_response(status_code: int, message: str) -> Dict[str, Any]:
    return json_response(status_code, {"error": message})


def binary_response(
    status_code: int,
    data: bytes,
    *,
    content_type: str,
    headers: Mapping[str, str] | None = None,
) -> Dict[str, Any]:
    merged = {"Content-Type": content_type, "Content-Length": str(len(data))}
    if headers:
        merged.update(headers)
    return {
        "statusCode": status_code,
        "headers": merged,
        "body": base64.b64encode(data).decode("ascii"),
        "isBase64Encoded": True,
    }


def _request_method(event: Mapping[str, Any]) -> str:
    if isinstance(event.get("requestContext"), dict):
        context = event["requestContext"]
        if isinstance(context.get("http"), dict):
            method = context["http"].get("method")
            if isinstance(method, str) and method:
                return method.upper()

    method = event.get("httpMethod", "")
    if isinstance(method, str):
        return method.upper()
    return ""


def _request_path(event: Mapping[str, Any]) -> str:
    raw_path = event.get("rawPath")
    if isinstance(raw_path, str) and raw_path:
        return raw_path

    path = event.get("path")
    if isinstance(path, str) and path:
        return path

    return "/"


def _normalized_path(event: Mapping[str, Any], path: str) -> str:
    """Strip API Gateway stage prefixes (for example '/dev') and trailing slashes."""
    context = event.get("requestContext")
    stage = context.get("stage") if isinstance(context, dict) else None
    if isinstance(stage, str) and stage.strip():
        stage_prefix = f"/{stage.strip()}"
        if path == stage_prefix:
            path = "/"
        elif path.startswith(f"{stage_prefix}/"):
            path = path[len(stage_prefix) :]

    if len(path) > 1:
        path = path.rstrip("/") or "/"
    return path


def _string_map(raw: Any, *, lower_keys: bool = False) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}

    values: dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(key, str) and isinstance(value, str):
            values[key.lower() if lower_keys else key] = value
    return values


def _raw_body(event: Mapping[str, Any]) -> Any:
    body = event.get("body")
    if isinstance(body, str) and event.get("isBase64Encoded") is True:
        try:
            return base64.b64decode(body).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise RequestError("request body must be valid JSON") from exc
    return body


@dataclass(frozen=True)
class Request:
    """The parts of a proxy event the handlers need."""

    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    session: SessionRecord | None = None

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> "Request":
        headers = _string_map(event.get("headers"), lower_keys=True)
        cookie_header = headers.get("cookie", "")
        extra_cookies = event.get("cookies")
        if isinstance(extra_cookies, list):
            parts = [part for part in extra_cookies if isinstance(part, str)]
            cookie_header = "; ".join(filter(None, [cookie_header, *parts]))

        return cls(
            method=_request_method(event),
            path=_normalized_path(event, _request_path(event)),
            query=_string_map(event.get("queryStringParameters")),
            headers=headers,
            cookies=parse_cookie(cookie_header).to_dict() if cookie_header else {},
            body=_raw_body(event),
        )

    @property
    def is_admin(self) -> bool:
        return self.session is not None and self.session.is_admin

    def json_body(self) -> dict[str, Any]:
        body = self.body
        if isinstance(body, dict):
            return body
        if not isinstance(body, str):
            raise RequestError("request body must be a JSON object")

        try:
            decoded = json.loads(body)
        except json.JSONDecodeError as exc:
            raise RequestError("request body must be valid JSON") from exc

        if not isinstance(decoded, dict):
            raise RequestError("request body must be a JSON object")
        return decoded

    def query_flag(self, name: str) -> bool | None:
        """Read a boolean query parameter; None when absent or unrecognised."""
        raw = self.query.get(name)
        if raw is None:
            return None
        value = raw.strip().lower()
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        return None

    def query_value(self, name: str) -> str | None:
        value = self.query.get(name, "").strip()
        return value or None

    def session_token(self) -> str | None:
        authorization = self.headers.get("authorization", "").strip()
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

        cookie_token = self.cookies.get(SESSION_COOKIE, "").strip()
        return cookie_token or None
