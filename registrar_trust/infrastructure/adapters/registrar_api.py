"""HTTP object store for the registrar API.

Fetches registrar objects from the registrar's JSON API:

    GET /api/view/{type}/{id}
    GET /api/viewat/{type}/{id}/{unix_ts}

Every response is wrapped in the registrar's response envelope:

    {
        "MessageType": "approversetobject",
        "ApproverSetObject": {...},
        "Errors": []
    }

An envelope with MessageType "error" carries only Errors. Responses are
never cached here.

Usage:
    async with RegistrarAPIObjectStore("https://registrar.example") as store:
        domain = await store.get_object(ObjectType.DOMAIN, 42)
"""

from __future__ import annotations

import ssl
from datetime import datetime
from typing import Any, Optional

import httpx
from pydantic import ValidationError
from structlog import get_logger

from registrar_trust.application.dtos.exports import (
    EXPORT_MODELS,
    RegistrarObjectExport,
)
from registrar_trust.application.ports.object_store import ObjectStoreProtocol
from registrar_trust.domain.errors.object_store import (
    ObjectNotFoundError,
    ObjectStoreError,
    UnexpectedObjectTypeError,
)
from registrar_trust.domain.models.registrar_object import ObjectType
from registrar_trust.domain.models.timestamps import unix_timestamp

logger = get_logger()

ERROR_MESSAGE_TYPE = "error"

# Envelope key holding the object for each kind
ENVELOPE_FIELDS: dict[ObjectType, str] = {
    ObjectType.DOMAIN: "DomainObject",
    ObjectType.HOST: "HostObject",
    ObjectType.CONTACT: "ContactObject",
    ObjectType.APPROVER: "ApproverObject",
    ObjectType.APPROVER_SET: "ApproverSetObject",
    ObjectType.CHANGE_REQUEST: "ChangeRequestObject",
    ObjectType.APPROVAL: "ApprovalObject",
}


def message_type_for(object_type: ObjectType) -> str:
    """Return the envelope MessageType for an object kind."""
    return f"{object_type.value}object"


def decode_envelope(
    object_type: ObjectType,
    object_id: int,
    envelope: Any,
    at_time: Optional[int] = None,
) -> RegistrarObjectExport:
    """Extract and decode the object carried by a registrar API response.

    Args:
        object_type: Kind of object requested.
        object_id: Identifier requested.
        envelope: Decoded JSON response body.
        at_time: Unix timestamp of a time-travel lookup, if any.

    Returns:
        The export model for object_type.

    Raises:
        ObjectStoreError: For error envelopes and undecodable objects.
        ObjectNotFoundError: If the envelope carries no object.
        UnexpectedObjectTypeError: If the envelope carries another kind.
    """
    if not isinstance(envelope, dict):
        raise ObjectStoreError("Registrar response is not a JSON object")

    message_type = envelope.get("MessageType", "")
    if message_type == ERROR_MESSAGE_TYPE:
        errors = envelope.get("Errors") or []
        raise ObjectStoreError(
            f"Registrar returned an error for {object_type.value} {object_id}: "
            + "; ".join(str(error) for error in errors)
        )

    expected = message_type_for(object_type)
    if message_type != expected:
        raise UnexpectedObjectTypeError(expected, str(message_type))

    document = envelope.get(ENVELOPE_FIELDS[object_type])
    if document is None:
        raise ObjectNotFoundError(object_type.value, object_id, at_time)

    try:
        return EXPORT_MODELS[object_type].model_validate(document)
    except ValidationError as exc:
        raise ObjectStoreError(
            f"Unable to decode {object_type.value} {object_id}: "
            f"{exc.error_count()} error(s)"
        ) from exc


def build_ssl_context(
    ca_bundle: Optional[str] = None,
    client_cert: Optional[str] = None,
    client_key: Optional[str] = None,
) -> ssl.SSLContext:
    """Build the TLS context for registrar API requests.

    Args:
        ca_bundle: CA bundle to trust instead of the system store.
        client_cert: Client certificate (PEM) for mutual TLS.
        client_key: Key for client_cert when not bundled with it.
    """
    context = ssl.create_default_context(cafile=ca_bundle)
    if client_cert:
        context.load_cert_chain(client_cert, client_key)
    return context


class RegistrarAPIObjectStore(ObjectStoreProtocol):
    """Object store backed by the registrar HTTP API.

    Example:
        async with RegistrarAPIObjectStore(base_url) as store:
            approver = await store.get_object_at(ObjectType.APPROVER, 3, when)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client_cert: Optional[str] = None,
        client_key: Optional[str] = None,
        ca_bundle: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: Registrar base URL.
            timeout: Request timeout in seconds.
            client_cert: Client certificate for mutual TLS.
            client_key: Key for the client certificate.
            ca_bundle: CA bundle for the registrar's server certificate.
            client: Preconfigured client, mainly for tests.
        """
        self.base_url = base_url.rstrip("/")
        if client is not None:
            self._client = client
        else:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=timeout,
                verify=build_ssl_context(ca_bundle, client_cert, client_key),
            )

    async def __aenter__(self) -> "RegistrarAPIObjectStore":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def get_object(
        self,
        object_type: ObjectType,
        object_id: int,
    ) -> RegistrarObjectExport:
        return await self._get(
            f"/api/view/{object_type.value}/{object_id}",
            object_type,
            object_id,
        )

    async def get_object_at(
        self,
        object_type: ObjectType,
        object_id: int,
        at_time: datetime,
    ) -> RegistrarObjectExport:
        timestamp = unix_timestamp(at_time)
        return await self._get(
            f"/api/viewat/{object_type.value}/{object_id}/{timestamp}",
            object_type,
            object_id,
            timestamp,
        )

    async def _get(
        self,
        path: str,
        object_type: ObjectType,
        object_id: int,
        at_time: Optional[int] = None,
    ) -> RegistrarObjectExport:
        log = logger.bind(path=path)
        try:
            response = await self._client.get(path)
        except httpx.HTTPError as exc:
            log.warning("registrar_request_failed", error=str(exc))
            raise ObjectStoreError(f"Request to {path} failed: {exc}") from exc

        if response.status_code == 404:
            raise ObjectNotFoundError(object_type.value, object_id, at_time)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            log.warning("registrar_request_failed", status_code=response.status_code)
            raise ObjectStoreError(
                f"Registrar returned HTTP {response.status_code} for {path}"
            ) from exc

        try:
            envelope = response.json()
        except ValueError as exc:
            raise ObjectStoreError(
                f"Registrar response for {path} is not JSON"
            ) from exc

        log.debug("registrar_object_fetched")
        return decode_envelope(object_type, object_id, envelope, at_time)

    async def close(self) -> None:
        """Close HTTP client."""
        await self._client.aclose()
