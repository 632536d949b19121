"""
iCloud Hide My Email client.

Reserving an alias is three strictly sequential calls:

1. validate  - confirm the session and discover the premiummailsettings URL
2. generate  - mint a candidate alias address
3. reserve   - claim it with a label and note

A failure at any step aborts the rest. Nothing is retried or rolled back: a
generated but unreserved address is simply abandoned upstream.
"""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from clients.http_transport import HttpResult, HttpTransport, TransportError

logger = logging.getLogger(__name__)

VALIDATE_URL = "https://setup.icloud.com/setup/ws/1/validate"
HME_SERVICE_KEY = "premiummailsettings"

CLIENT_PARAMS = [
    ("clientBuildNumber", "2420Hotfix12"),
    ("clientMasteringNumber", "2420Hotfix12"),
    ("clientId", ""),
    ("dsid", ""),
]

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36"
)


# === Errors ===


class UpstreamError(Exception):
    """Base class for failures talking to iCloud."""


class UpstreamTransportError(UpstreamError):
    """Network failure, non-2xx status, or unparseable body."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class UpstreamDiscoveryError(UpstreamError):
    """Validate response has no usable premiummailsettings URL."""


class UpstreamRejectedError(UpstreamError):
    """Envelope reported success=false. Carries the upstream error payload as-is."""

    def __init__(self, step: str, error: Any):
        self.step = step
        self.error = error
        super().__init__(f"Failed to {step} HME: {error!r}")


# === Response Types ===


class WebService(BaseModel):
    url: str | None = None


class ValidateResponse(BaseModel):
    webservices: dict[str, WebService]


class GeneratedHme(BaseModel):
    hme: str


class ReservedAlias(BaseModel):
    """Alias record returned by the reserve call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    forward_to_email: str | None = None
    address: str = Field(..., validation_alias="hme")
    is_active: bool
    label: str
    note: str
    create_timestamp: int


class ReservedHme(BaseModel):
    hme: ReservedAlias


T = TypeVar("T", bound=BaseModel)


class HmeEnvelope(BaseModel):
    """Uniform premiummailsettings response wrapper. result is typed per step."""

    success: bool
    result: Any = None
    error: Any = None


# === Client ===


class ICloudHmeClient:
    """Runs the validate/generate/reserve handshake over an injected transport."""

    def __init__(self, transport: HttpTransport):
        self._transport = transport

    def _headers(self, cookie_header: str) -> dict[str, str]:
        return {
            "Cookie": cookie_header,
            "Content-Type": "application/json",
            "Origin": "https://www.icloud.com",
            "Referer": "https://www.icloud.com/",
            "User-Agent": USER_AGENT,
        }

    def _post(self, step: str, url: str, cookie_header: str, body: Any | None = None) -> str:
        """POST one step and return the body text of a 2xx response."""
        try:
            result: HttpResult = self._transport.post(
                url,
                headers=self._headers(cookie_header),
                params=CLIENT_PARAMS,
                json_body=body,
            )
        except TransportError as e:
            raise UpstreamTransportError(f"{step} request failed: {e}")

        logger.debug(f"{step} response ({result.status_code}): {result.text}")

        if not result.ok:
            logger.error(f"iCloud {step} returned HTTP {result.status_code}")
            raise UpstreamTransportError(
                f"{step} returned HTTP {result.status_code}",
                status_code=result.status_code,
            )
        return result.text

    def _parse(self, step: str, model: type[T], text: str) -> T:
        try:
            return model.model_validate_json(text)
        except ValidationError as e:
            logger.error(f"iCloud {step} response did not parse: {e}")
            raise UpstreamTransportError(f"{step} response was not understood")

    def _unwrap(self, step: str, model: type[T], text: str) -> T:
        """Check the envelope, then validate its result against model."""
        envelope = self._parse(step, HmeEnvelope, text)

        if not envelope.success:
            logger.error(f"iCloud {step} rejected: {envelope.error!r}")
            raise UpstreamRejectedError(step, envelope.error)

        try:
            return model.model_validate(envelope.result)
        except ValidationError as e:
            logger.error(f"iCloud {step} result did not parse: {e}")
            raise UpstreamTransportError(f"{step} result was not understood")

    def validate(self, cookie_header: str) -> str:
        """
        Validate the session and return the premiummailsettings base URL.

        Raises:
            UpstreamDiscoveryError: Service missing or its URL is null.
            UpstreamTransportError: On transport or parse failure.
        """
        text = self._post("validate", VALIDATE_URL, cookie_header)
        response = self._parse("validate", ValidateResponse, text)

        service = response.webservices.get(HME_SERVICE_KEY)
        if service is None:
            raise UpstreamDiscoveryError(f"{HME_SERVICE_KEY} service not found")
        if service.url is None:
            raise UpstreamDiscoveryError(f"{HME_SERVICE_KEY} URL is null")
        return service.url

    def generate(self, base_url: str, cookie_header: str) -> str:
        """
        Generate a candidate alias and return its handle.

        Raises:
            UpstreamRejectedError: Envelope success=false.
            UpstreamTransportError: On transport or parse failure.
        """
        text = self._post(
            "generate", f"{base_url}/v1/hme/generate", cookie_header, {"langCode": "en-us"}
        )
        return self._unwrap("generate", GeneratedHme, text).hme

    def reserve(self, base_url: str, cookie_header: str, hme: str, label: str, note: str) -> ReservedAlias:
        """
        Reserve a generated alias.

        Raises:
            UpstreamRejectedError: Envelope success=false.
            UpstreamTransportError: On transport or parse failure.
        """
        text = self._post(
            "reserve",
            f"{base_url}/v1/hme/reserve",
            cookie_header,
            {"hme": hme, "label": label, "note": note},
        )
        return self._unwrap("reserve", ReservedHme, text).hme

    def generate_and_reserve(self, cookie_header: str, label: str, note: str) -> ReservedAlias:
        """Full handshake. Every call mints a new alias; nothing is deduplicated."""
        base_url = self.validate(cookie_header)
        hme = self.generate(base_url, cookie_header)
        alias = self.reserve(base_url, cookie_header, hme, label, note)
        logger.info(f"Reserved iCloud alias {alias.address}")
        return alias
