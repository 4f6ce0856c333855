"""API Gateway Lambda runtime handler for the back office routes."""

from __future__ import annotations

import atexit
import logging
import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from functools import lru_cache, partial
from typing import Any, Callable, Dict, Mapping

from werkzeug.http import dump_cookie

from backoffice.config import Collection, ConfigurationError, Settings
from backoffice.models.validation import ModelValidationError, format_rfc3339_utc, utc_now
from backoffice.repositories import (
    ContactRepository,
    CourseRepository,
    DemoBookingRepository,
    EventRegistrationRepository,
    EventRepository,
    InquiryRepository,
    RepositoryError,
    UserRepository,
)
from backoffice.sessions import (
    DynamoDbSessionStore,
    issue_session,
    resolve_session,
    revoke_session,
)
from backoffice.sessions.issuing import TokenFactory, default_token_factory
from backoffice.store import DocumentStore

from backend import catalog_api, images, leads_api
from backend.access import Access, Decision, evaluate
from backend.catalog_api import COURSES, EVENTS
from backend.http import SESSION_COOKIE, Request, RequestError, error_response, json_response
from backend.images import ImageService, ImageUploadError, S3ImageClient, create_default_s3_client
from backend.leads_api import DEMO_BOOKINGS, EVENT_REGISTRATIONS, INQUIRIES

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type,Authorization,X-Amz-Date,X-Api-Key,X-Amz-Security-Token"
INTERNAL_ERROR_MESSAGE = "Internal server error"
UNAUTHORIZED_MESSAGE = "Unauthorized"

Handler = Callable[..., Dict[str, Any]]
_PATH_PARAM = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class Route:
    method: str
    pattern: re.Pattern[str]
    access: Access
    handler: Handler


def _route(method: str, template: str, access: Access, handler: Handler) -> Route:
    """Compile '/courses/{document_id}' style templates into named-group patterns."""
    regex = _PATH_PARAM.sub(r"(?P<\1>[^/]+)", template)
    return Route(method=method, pattern=re.compile(f"^{regex}$"), access=access, handler=handler)


@dataclass
class Application:
    """Repositories and services shared by every request of one execution environment."""

    settings: Settings
    courses: CourseRepository
    events: EventRepository
    inquiries: InquiryRepository
    demo_bookings: DemoBookingRepository
    registrations: EventRegistrationRepository
    contacts: ContactRepository
    users: UserRepository
    sessions: DynamoDbSessionStore
    images: ImageService | None = None
    health_check: Callable[[], bool] = lambda: True
    clock: Callable[[], datetime] = utc_now
    token_factory: TokenFactory = default_token_factory
    _admin_checked: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_store(
        cls,
        store: DocumentStore,
        settings: Settings,
        *,
        s3_client: S3ImageClient | None = None,
        clock: Callable[[], datetime] = utc_now,
        token_factory: TokenFactory = default_token_factory,
    ) -> "Application":
        image_service = None
        if settings.images_bucket:
            image_service = ImageService(
                store.table(Collection.IMAGES),
                bucket=settings.images_bucket,
                s3_client=s3_client or create_default_s3_client(),
                clock=lambda: format_rfc3339_utc(clock()),
            )

        return cls(
            settings=settings,
            courses=CourseRepository(store.table(Collection.COURSES), clock=clock),
            events=EventRepository(store.table(Collection.EVENTS), clock=clock),
            inquiries=InquiryRepository(store.table(Collection.INQUIRIES), clock=clock),
            demo_bookings=DemoBookingRepository(store.table(Collection.DEMO_BOOKINGS), clock=clock),
            registrations=EventRegistrationRepository(
                store.table(Collection.EVENT_REGISTRATIONS),
                clock=clock,
            ),
            contacts=ContactRepository(store.table(Collection.CONTACTS), clock=clock),
            users=UserRepository(store.table(Collection.USERS), clock=clock),
            sessions=DynamoDbSessionStore(store.table(Collection.SESSIONS)),
            images=image_service,
            health_check=store.ping,
            clock=clock,
            token_factory=token_factory,
        )

    def ensure_admin(self) -> None:
        """Create the bootstrap admin account once per application instance."""
        if self._admin_checked:
            return
        self.users.ensure_admin(
            email=self.settings.admin_email,
            password=self.settings.admin_password,
            name=self.settings.admin_name,
        )
        self._admin_checked = True

    def handle(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        return self._with_cors(self._dispatch(event))

    def _dispatch(self, event: Mapping[str, Any]) -> Dict[str, Any]:
        method = "?"
        path = "?"
        try:
            request = Request.from_event(event)
            method, path = request.method, request.path
            if method == "OPTIONS":
                return json_response(200, {})

            route, params = _match(method, path)
            if route is None:
                return error_response(404, "Not found")

            session = resolve_session(request.session_token(), store=self.sessions, now=self.clock())
            if evaluate(session, route.access) is not Decision.ALLOW:
                return error_response(401, UNAUTHORIZED_MESSAGE)

            return route.handler(self, replace(request, session=session), **params)
        except (ModelValidationError, RequestError, ImageUploadError) as exc:
            return error_response(400, str(exc))
        except ConfigurationError as exc:
            logger.exception("Misconfigured runtime while handling %s %s", method, path)
            return error_response(500, str(exc))
        except RepositoryError:
            return error_response(500, INTERNAL_ERROR_MESSAGE)
        except Exception:
            logger.exception("Unhandled error while handling %s %s", method, path)
            return error_response(500, INTERNAL_ERROR_MESSAGE)

    def _with_cors(self, response: Dict[str, Any]) -> Dict[str, Any]:
        origin = self.settings.cors_allow_origin
        headers = {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
            "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        }
        if origin != "*":
            headers["Access-Control-Allow-Credentials"] = "true"
        headers.update(response.get("headers") or {})
        return {**response, "headers": headers}


def _session_cookie(token: str, *, max_age: int) -> str:
    return dump_cookie(
        SESSION_COOKIE,
        token,
        max_age=max_age,
        path="/",
        secure=True,
        httponly=True,
        samesite="Lax",
    )


def _handle_health(app: Application, request: Request) -> Dict[str, Any]:
    if app.health_check():
        return json_response(200, {"status": "ok", "database": "connected"})
    return json_response(503, {"status": "error", "database": "disconnected"})


def _handle_login(app: Application, request: Request) -> Dict[str, Any]:
    payload = request.json_body()
    email = payload.get("email")
    password = payload.get("password")
    if not isinstance(email, str) or not email.strip() or not isinstance(password, str) or not password:
        return error_response(400, "Email and password are required")

    app.ensure_admin()
    user = app.users.authenticate(email, password)
    if user is None:
        return error_response(401, "Invalid email or password")

    record = issue_session(
        user=user,
        store=app.sessions,
        config=app.settings.sessions,
        token_factory=app.token_factory,
        now=app.clock(),
    )
    cookie = _session_cookie(record.token, max_age=int(app.settings.sessions.ttl.total_seconds()))
    return json_response(
        200,
        {"token": record.token, "expiresAt": record.expires_at, "user": user.to_public_dict()},
        headers={"Set-Cookie": cookie},
    )


def _handle_logout(app: Application, request: Request) -> Dict[str, Any]:
    token = request.session_token()
    if token is not None:
        revoke_session(token, store=app.sessions, now=app.clock())
    return json_response(
        200,
        {"success": True},
        headers={"Set-Cookie": _session_cookie("", max_age=0)},
    )


def _handle_session(app: Application, request: Request) -> Dict[str, Any]:
    session = request.session
    user = app.users.find_by_email(session.user_id)
    if user is None:
        return error_response(401, UNAUTHORIZED_MESSAGE)
    return json_response(200, {"user": user.to_public_dict(), "expiresAt": session.expires_at})


def _catalog_routes(prefix: str, resource: catalog_api.CatalogResource) -> list[Route]:
    item = f"{prefix}/{{document_id}}"
    return [
        _route("GET", prefix, Access.PUBLIC, partial(catalog_api.list_documents, resource)),
        _route("POST", prefix, Access.ADMIN, partial(catalog_api.create_document, resource)),
        _route("GET", f"{prefix}/statistics", Access.ADMIN, partial(catalog_api.document_statistics, resource)),
        _route("GET", item, Access.PUBLIC, partial(catalog_api.get_document, resource)),
        _route("PATCH", item, Access.ADMIN, partial(catalog_api.update_document, resource)),
        _route("DELETE", item, Access.ADMIN, partial(catalog_api.delete_document, resource)),
        _route("PUT", f"{item}/archive", Access.ADMIN, partial(catalog_api.archive_document, resource)),
        _route("PUT", f"{item}/unarchive", Access.ADMIN, partial(catalog_api.unarchive_document, resource)),
    ]


def _lead_routes(prefix: str, resource: leads_api.LeadResource) -> list[Route]:
    item = f"{prefix}/{{lead_id}}"
    return [
        _route("GET", prefix, Access.ADMIN, partial(leads_api.list_leads, resource)),
        _route("POST", prefix, Access.PUBLIC, partial(leads_api.create_lead, resource)),
        _route("GET", f"{prefix}/statistics", Access.ADMIN, partial(leads_api.lead_statistics, resource)),
        _route("GET", item, Access.ADMIN, partial(leads_api.get_lead, resource)),
        _route("PATCH", item, Access.ADMIN, partial(leads_api.update_lead_status, resource)),
    ]


# First match wins, so literal segments precede their {id} siblings.
ROUTES: tuple[Route, ...] = (
    _route("GET", "/health", Access.PUBLIC, _handle_health),
    _route("POST", "/auth/login", Access.PUBLIC, _handle_login),
    _route("POST", "/auth/logout", Access.PUBLIC, _handle_logout),
    _route("GET", "/auth/session", Access.SESSION, _handle_session),
    *_catalog_routes("/courses", COURSES),
    _route("GET", "/events/{event_id}/registrations", Access.ADMIN, catalog_api.event_registrations),
    *_catalog_routes("/events", EVENTS),
    *_lead_routes("/inquiries", INQUIRIES),
    *_lead_routes("/demo-bookings", DEMO_BOOKINGS),
    *_lead_routes("/event-registrations", EVENT_REGISTRATIONS),
    _route("POST", "/contact", Access.PUBLIC, leads_api.submit_contact),
    _route("POST", "/uploads", Access.ADMIN, images.handle_upload),
    _route("GET", "/images/{image_id}", Access.PUBLIC, images.handle_image),
)


def _match(method: str, path: str) -> tuple[Route | None, dict[str, str]]:
    for route in ROUTES:
        if route.method != method:
            continue
        match = route.pattern.match(path)
        if match:
            return route, match.groupdict()
    return None, {}


@lru_cache(maxsize=1)
def default_application() -> Application:
    """Build the process-wide application from the environment on first use."""
    settings = Settings.from_env()
    logging.getLogger().setLevel(settings.log_level)

    store = DocumentStore(settings).open()
    atexit.register(store.close)
    return Application.from_store(store, settings)


def lambda_handler(
    event: Mapping[str, Any],
    context: Any,
    *,
    app: Application | None = None,
) -> Dict[str, Any]:
    """API Gateway Lambda entrypoint."""
    if app is None:
        try:
            app = default_application()
        except ConfigurationError as exc:
            logger.exception("Runtime configuration is invalid")
            return error_response(500, str(exc))
    return app.handle(event)
