"""
QRZ XML data service client: login, callsign lookup and DXCC entity lookup.

Typical use:

    with QRZClient() as qrz:
        result = qrz.login("w1abc", "secret")
        if result.ok:
            found = qrz.lookup_callsign(result.session, "K1XYZ")

Each call returns an outcome from qrz_results; errors are values, not
exceptions. The caller keeps the session key between calls and logs in again
once a call comes back Invalid because the key expired.
"""

import logging
from typing import Dict, Optional, Union

from qrz_results import (
    BadSession, EntitiesResult, LoginResult, LookupResult, ServerError,
    classify_entities, classify_login, classify_lookup,
)
from qrz_transport import AsyncQRZTransport, QRZTransport, TransportError
from qrz_xml import (
    Session, XMLParseError, extract_callsign, extract_dxcc_entities,
    extract_session, parse_document,
)

logger = logging.getLogger(__name__)

ALL_ENTITIES = "all"

SessionArg = Union[str, Session]


def resolve_session_key(session: SessionArg) -> Union[str, BadSession]:
    """
    Turn the session argument of a lookup into a key.

    Args:
        session: A session key, or a Session record from an earlier call

    Returns:
        The session key, or BadSession if the record carries an error
    """
    if isinstance(session, Session):
        if session.error is not None:
            return BadSession(session)
        return session.key
    if isinstance(session, str):
        return session
    raise TypeError(f"session must be a key string or Session, not {type(session).__name__}")


def _login_params(username: str, password: str) -> Dict[str, str]:
    return {"username": username, "password": password}


def _lookup_params(key: str, callsign: str) -> Dict[str, str]:
    return {"s": key, "callsign": callsign}


def _dxcc_params(key: str, entity_key: Union[str, int]) -> Dict[str, str]:
    return {"s": key, "dxcc": str(entity_key)}


def _process_login(body: bytes) -> LoginResult:
    try:
        root = parse_document(body)
    except XMLParseError as e:
        logger.warning(f"QRZ login failed: {e}")
        return ServerError(str(e))
    result = classify_login(extract_session(root))
    if not result.ok:
        logger.info(f"QRZ login rejected: {result.reason}")
    return result


def _process_lookup(body: bytes, callsign: str) -> LookupResult:
    try:
        root = parse_document(body)
    except XMLParseError as e:
        logger.warning(f"QRZ lookup for {callsign} failed: {e}")
        return ServerError(str(e))
    result = classify_lookup(extract_session(root), extract_callsign(root))
    if not result.ok:
        logger.info(f"QRZ lookup for {callsign} rejected: {result.reason}")
    return result


def _process_entities(body: bytes, entity_key: Union[str, int]) -> EntitiesResult:
    try:
        root = parse_document(body)
    except XMLParseError as e:
        logger.warning(f"QRZ DXCC lookup for {entity_key} failed: {e}")
        return ServerError(str(e))
    result = classify_entities(extract_session(root), extract_dxcc_entities(root))
    if not result.ok:
        logger.info(f"QRZ DXCC lookup for {entity_key} rejected: {result.reason}")
    return result


def _transport_failed(operation: str, error: TransportError) -> ServerError:
    logger.warning(f"QRZ {operation} failed: {error}")
    return ServerError(str(error))


class QRZClient:
    """Blocking QRZ XML client."""

    def __init__(self, transport: Optional[QRZTransport] = None):
        self._owns_transport = transport is None
        self.transport = transport or QRZTransport()

    def login(self, username: str, password: str) -> LoginResult:
        """
        Log in and obtain a session key.

        Returns:
            LoginOk with the new Session, Invalid (bad credentials and the
            like), or ServerError
        """
        try:
            body = self.transport.get(_login_params(username, password))
        except TransportError as e:
            return _transport_failed("login", e)
        return _process_login(body)

    def lookup_callsign(self, session: SessionArg, callsign: str) -> LookupResult:
        """
        Look up a callsign.

        Args:
            session: Session key, or the Session returned by login
            callsign: Callsign to look up

        Returns:
            LookupOk, Invalid, ServerError, or BadSession when given a failed
            Session record (no request is made in that case)
        """
        key = resolve_session_key(session)
        if isinstance(key, BadSession):
            logger.info(f"QRZ lookup for {callsign} skipped: session has error {session.error!r}")
            return key
        try:
            body = self.transport.get(_lookup_params(key, callsign))
        except TransportError as e:
            return _transport_failed(f"lookup for {callsign}", e)
        return _process_lookup(body, callsign)

    def fetch_dxcc_entities(self, session_key: str, entity_key: Union[str, int] = ALL_ENTITIES) -> EntitiesResult:
        """
        Fetch DXCC entity records.

        Args:
            session_key: Session key from login
            entity_key: DXCC entity number, a callsign, or "all" for every entity

        Returns:
            EntitiesOk (possibly with no entities), Invalid, or ServerError
        """
        try:
            body = self.transport.get(_dxcc_params(session_key, entity_key))
        except TransportError as e:
            return _transport_failed(f"DXCC lookup for {entity_key}", e)
        return _process_entities(body, entity_key)

    def close(self):
        if self._owns_transport:
            self.transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class AsyncQRZClient:
    """Asyncio QRZ XML client with the same operations as QRZClient."""

    def __init__(self, transport: Optional[AsyncQRZTransport] = None):
        self._owns_transport = transport is None
        self.transport = transport or AsyncQRZTransport()

    async def login(self, username: str, password: str) -> LoginResult:
        try:
            body = await self.transport.get(_login_params(username, password))
        except TransportError as e:
            return _transport_failed("login", e)
        return _process_login(body)

    async def lookup_callsign(self, session: SessionArg, callsign: str) -> LookupResult:
        key = resolve_session_key(session)
        if isinstance(key, BadSession):
            logger.info(f"QRZ lookup for {callsign} skipped: session has error {session.error!r}")
            return key
        try:
            body = await self.transport.get(_lookup_params(key, callsign))
        except TransportError as e:
            return _transport_failed(f"lookup for {callsign}", e)
        return _process_lookup(body, callsign)

    async def fetch_dxcc_entities(self, session_key: str, entity_key: Union[str, int] = ALL_ENTITIES) -> EntitiesResult:
        try:
            body = await self.transport.get(_dxcc_params(session_key, entity_key))
        except TransportError as e:
            return _transport_failed(f"DXCC lookup for {entity_key}", e)
        return _process_entities(body, entity_key)

    async def close(self):
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()


def login(username: str, password: str) -> LoginResult:
    """Log in using a one-off client built from config."""
    with QRZClient() as client:
        return client.login(username, password)


def lookup_callsign(session: SessionArg, callsign: str) -> LookupResult:
    """Look up a callsign using a one-off client built from config."""
    with QRZClient() as client:
        return client.lookup_callsign(session, callsign)


def fetch_dxcc_entities(session_key: str, entity_key: Union[str, int] = ALL_ENTITIES) -> EntitiesResult:
    """Fetch DXCC entities using a one-off client built from config."""
    with QRZClient() as client:
        return client.fetch_dxcc_entities(session_key, entity_key)
