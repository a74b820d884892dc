"""
Outcome types for QRZ operations and the classifiers that produce them.

Every operation returns exactly one outcome value; nothing is raised to the
caller. The Session error field alone decides between success and Invalid.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from qrz_xml import Callsign, DXCCEntity, Session


@dataclass(frozen=True)
class LoginOk:
    """Successful login; session.key holds the new session key."""
    session: Session
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class LookupOk:
    """Successful callsign lookup."""
    session: Session
    callsign: Callsign
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class EntitiesOk:
    """Successful DXCC lookup, entities in response order."""
    session: Session
    entities: Tuple[DXCCEntity, ...]
    ok: bool = field(default=True, init=False)

    def __post_init__(self):
        object.__setattr__(self, "entities", tuple(self.entities))


@dataclass(frozen=True)
class Invalid:
    """The service answered but rejected the request."""
    session: Session
    ok: bool = field(default=False, init=False)

    @property
    def reason(self) -> Optional[str]:
        return self.session.error


@dataclass(frozen=True)
class ServerError:
    """No usable response: network failure or an unparseable body."""
    detail: str = field(default="", compare=False)
    ok: bool = field(default=False, init=False)


@dataclass(frozen=True)
class BadSession:
    """A failed Session record was passed where a usable one was required."""
    session: Session
    ok: bool = field(default=False, init=False)


LoginResult = Union[LoginOk, Invalid, ServerError]
LookupResult = Union[LookupOk, Invalid, ServerError, BadSession]
EntitiesResult = Union[EntitiesOk, Invalid, ServerError]


def classify_login(session: Session) -> Union[LoginOk, Invalid]:
    if session.error is None:
        return LoginOk(session)
    return Invalid(session)


def classify_lookup(session: Session, callsign: Callsign) -> Union[LookupOk, Invalid]:
    if session.error is None:
        return LookupOk(session, callsign)
    return Invalid(session)


def classify_entities(session: Session, entities: List[DXCCEntity]) -> Union[EntitiesOk, Invalid]:
    if session.error is None:
        return EntitiesOk(session, entities)
    return Invalid(session)
