"""Per-widget request orchestration.

A widget kind declares an API template, a set of named mappings (one
upstream call each) and an auth policy. ``fetch_mapping`` performs exactly
one call and always answers with a ``Payload``; nothing raised by the
transport escapes this module.
"""

from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass, field
import json
import logging
from typing import Any, Callable, Protocol
from urllib.parse import urlencode

import requests

from .base import Error, Payload, WidgetResult, WidgetSpec, loading, select_fields
from .kinds import WidgetKind

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0

Normalizer = Callable[[dict[str, Payload], WidgetSpec, tuple[str, ...]], WidgetResult]


@dataclass(frozen=True)
class Auth:
    kind: str = "none"
    name: str = ""
    template: str = ""

    @classmethod
    def header(cls, name: str, template: str = "{key}") -> Auth:
        return cls("header", name, template)

    @classmethod
    def bearer(cls, template: str = "{key}") -> Auth:
        return cls("header", "Authorization", f"Bearer {template}")

    @classmethod
    def basic(cls) -> Auth:
        return cls("basic")

    @classmethod
    def query(cls, name: str, template: str = "{key}") -> Auth:
        return cls("query", name, template)

    def apply(self, credentials: dict[str, str], headers: dict[str, str], params: dict[str, Any]) -> None:
        # KeyError on a missing credential
        if self.kind == "header":
            headers[self.name] = self.template.format_map(credentials)
        elif self.kind == "query":
            params[self.name] = self.template.format_map(credentials)
        elif self.kind == "basic":
            pair = f"{credentials['username']}:{credentials['password']}"
            headers["Authorization"] = "Basic " + base64.b64encode(pair.encode("utf-8")).decode("ascii")


@dataclass(frozen=True)
class Mapping:
    endpoint: str
    params: dict[str, Any] = field(default_factory=dict)
    method: str = "GET"
    body: Any = None
    validate: tuple[str, ...] = ()
    required: bool = True
    format: str = "json"


@dataclass(frozen=True)
class WidgetDefinition:
    kind: WidgetKind
    api: str
    mappings: dict[str, Mapping]
    normalize: Normalizer
    auth: Auth = Auth()
    placeholders: tuple[str, ...] = ()
    default_fields: tuple[str, ...] = ()
    select_mappings: Callable[[WidgetSpec, tuple[str, ...]], tuple[str, ...]] | None = None
    refresh_interval: float | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def fields_for(self, spec: WidgetSpec) -> tuple[str, ...]:
        return select_fields(spec.fields, self.default_fields)

    def mappings_for(self, spec: WidgetSpec, selected: tuple[str, ...]) -> tuple[str, ...]:
        if self.select_mappings is None:
            return tuple(self.mappings)
        return self.select_mappings(spec, selected)

    def reduce(self, payloads: dict[str, Payload], spec: WidgetSpec, selected: tuple[str, ...]) -> WidgetResult:
        required = [name for name in payloads if self.mappings[name].required]
        for name in required:
            if payloads[name].error is not None:
                return Error(payloads[name].error)
        if any(payloads[name].data is None for name in required):
            return loading(selected, self.placeholders)
        try:
            return self.normalize(payloads, spec, selected)
        except Exception as e:
            logger.warning("Unexpected %s response shape: %s", self.kind.value, e)
            return Error(f"Unexpected response: {e}")


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: bytes = b""


class Transport(Protocol):
    def __call__(
        self, url: str, headers: dict[str, str], method: str = "GET", body: bytes | None = None
    ) -> TransportResponse:
        ...


class HttpTransport:
    def __init__(self, timeout: float = DEFAULT_TIMEOUT, verify: bool = True, session: requests.Session | None = None) -> None:
        self.timeout = timeout
        self.verify = verify
        self._session = session or requests.Session()

    def __call__(
        self, url: str, headers: dict[str, str], method: str = "GET", body: bytes | None = None
    ) -> TransportResponse:
        r = self._session.request(method, url, headers=headers, data=body, timeout=self.timeout, verify=self.verify)
        return TransportResponse(status=r.status_code, body=r.content)


_default_transport: HttpTransport | None = None


def default_transport() -> HttpTransport:
    """Process-wide transport used when a caller does not pass one."""
    global _default_transport
    if _default_transport is None:
        _default_transport = HttpTransport()
    return _default_transport


def build_url(api: str, spec: WidgetSpec, endpoint: str, params: dict[str, Any]) -> str:
    values = {k: v for k, v in spec.options.items() if isinstance(v, (str, int, float))}
    values.update(spec.credentials)
    values["url"] = spec.url.rstrip("/")
    values["endpoint"] = endpoint
    url = api.format_map(values)
    if params:
        url += ("&" if "?" in url else "?") + urlencode(params, doseq=True)
    return url


def _upstream_message(response: TransportResponse) -> str:
    text = response.body.decode("utf-8", errors="replace").strip()
    try:
        js = json.loads(text)
    except ValueError:
        js = None
    if isinstance(js, dict):
        for key in ("message", "error", "detail"):
            value = js.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if isinstance(value, str) and value:
                return value
    return text or f"HTTP Error {response.status}"


def fetch_mapping(definition: WidgetDefinition, spec: WidgetSpec, name: str, transport: Transport) -> Payload:
    mapping = definition.mappings[name]
    headers = dict(definition.headers)
    params = dict(mapping.params)
    try:
        definition.auth.apply(spec.credentials, headers, params)
        url = build_url(definition.api, spec, mapping.endpoint, params)
    except KeyError as e:
        return Payload(error=f"Missing widget setting: {e.args[0]}")

    body = None
    if mapping.body is not None:
        body = json.dumps(mapping.body).encode("utf-8")
        headers.setdefault("Content-Type", "application/json")

    try:
        response = transport(url, headers, mapping.method, body)
    except Exception as e:
        logger.warning("%s request to %s failed: %s", definition.kind.value, url, e)
        return Payload(error=str(e))

    if response.status >= 400:
        message = _upstream_message(response)
        logger.warning("%s request to %s returned %s: %s", definition.kind.value, url, response.status, message)
        return Payload(error=message)

    text = response.body.decode("utf-8", errors="replace")
    if mapping.format == "text":
        return Payload(data=text)
    try:
        data = json.loads(text)
    except ValueError:
        return Payload(error="Invalid JSON response")

    if mapping.validate and isinstance(data, dict):
        missing = [k for k in mapping.validate if k not in data]
        if missing:
            return Payload(error=f"Missing expected fields: {', '.join(missing)}")
    return Payload(data=data)


async def fetch_payloads(
    definition: WidgetDefinition, spec: WidgetSpec, names: tuple[str, ...], transport: Transport
) -> dict[str, Payload]:
    results = await asyncio.gather(
        *(asyncio.to_thread(fetch_mapping, definition, spec, name, transport) for name in names)
    )
    return dict(zip(names, results))


async def refresh(definition: WidgetDefinition, spec: WidgetSpec, transport: Transport | None = None) -> WidgetResult:
    selected = definition.fields_for(spec)
    names = definition.mappings_for(spec, selected)
    payloads = await fetch_payloads(definition, spec, names, transport or default_transport())
    return definition.reduce(payloads, spec, selected)
