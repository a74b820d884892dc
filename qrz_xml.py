"""
XML extraction for QRZ XML data service responses.

Every response is a QRZDatabase document holding one Session element and,
depending on the request, a Callsign element or repeated DXCC elements.
Each record is pulled out through a fixed table of (field name, element tags)
so the same extraction logic serves all three shapes.
"""

import copy
import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, asdict
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

from qrz_transport import QRZError

logger = logging.getLogger(__name__)

ROOT_TAG = "QRZDatabase"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


class XMLParseError(QRZError):
    """Exception for response bodies that are not well-formed XML."""
    pass


class FieldSpec(NamedTuple):
    """Maps a record field to the element tags it is read from."""
    name: str
    tags: Tuple[str, ...]
    optional: bool = False


@dataclass(frozen=True)
class Session:
    """Session block present in every QRZ response."""
    error: Optional[str] = None
    key: str = ""
    count: str = ""
    expiration: str = ""
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return asdict(self)


@dataclass(frozen=True)
class Callsign:
    """Callsign record returned by a callsign lookup."""
    callsign: str = ""
    xref_callsign: str = ""
    previous_callsign: str = ""
    aliases: str = ""
    license_class: str = ""
    license_codes: str = ""
    license_eff_dt: str = ""
    license_exp_dt: str = ""
    first_name: str = ""
    last_name: str = ""
    born: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    email: str = ""
    callsign_entity_id: str = ""
    callsign_entity_name: str = ""
    mailing_entity_id: str = ""
    lat: str = ""
    long: str = ""
    grid: str = ""
    fips: str = ""
    cq_zone: str = ""
    itu_zone: str = ""
    geoloc: str = ""
    eqsl: str = ""
    mqsl: str = ""
    lotw: str = ""
    bio: str = ""
    biodate: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(frozen=True)
class DXCCEntity:
    """DXCC entity record returned by a DXCC lookup."""
    entity_id: str = ""
    country_code: str = ""
    country_code_full: str = ""
    country_name: str = ""
    continent: str = ""
    itu_zone: str = ""
    cq_zone: str = ""
    timezone: str = ""
    lat: str = ""
    long: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


SESSION_FIELDS = (
    FieldSpec("error", ("Error",), optional=True),
    FieldSpec("key", ("Key",)),
    FieldSpec("count", ("Count",)),
    FieldSpec("expiration", ("SubExp",)),
    FieldSpec("message", ("Message",)),
)

CALLSIGN_FIELDS = (
    FieldSpec("callsign", ("call",)),
    FieldSpec("xref_callsign", ("xref",)),
    FieldSpec("previous_callsign", ("p_call",)),
    FieldSpec("aliases", ("aliases",)),
    FieldSpec("license_class", ("class",)),
    FieldSpec("license_codes", ("codes",)),
    FieldSpec("license_eff_dt", ("efdate",)),
    FieldSpec("license_exp_dt", ("expdate",)),
    FieldSpec("first_name", ("fname",)),
    FieldSpec("last_name", ("name",)),
    FieldSpec("born", ("born",)),
    FieldSpec("address", ("addr1",)),
    FieldSpec("city", ("addr2",)),
    FieldSpec("state", ("state",)),
    FieldSpec("country", ("country",)),
    FieldSpec("email", ("email",)),
    FieldSpec("callsign_entity_id", ("dxcc",)),
    FieldSpec("callsign_entity_name", ("land",)),
    FieldSpec("mailing_entity_id", ("ccode",)),
    FieldSpec("lat", ("lat",)),
    FieldSpec("long", ("lon", "long")),
    FieldSpec("grid", ("grid",)),
    FieldSpec("fips", ("fips",)),
    FieldSpec("cq_zone", ("cqzone",)),
    FieldSpec("itu_zone", ("ituzone",)),
    FieldSpec("geoloc", ("geoloc",)),
    FieldSpec("eqsl", ("eqsl",)),
    FieldSpec("mqsl", ("mqsl",)),
    FieldSpec("lotw", ("lotw",)),
    FieldSpec("bio", ("bio",)),
    FieldSpec("biodate", ("biodate",)),
)

DXCC_FIELDS = (
    FieldSpec("entity_id", ("dxcc",)),
    FieldSpec("country_code", ("cc",)),
    FieldSpec("country_code_full", ("ccc",)),
    FieldSpec("country_name", ("name",)),
    FieldSpec("continent", ("continent",)),
    FieldSpec("itu_zone", ("ituzone",)),
    FieldSpec("cq_zone", ("cqzone",)),
    FieldSpec("timezone", ("timezone",)),
    FieldSpec("lat", ("lat",)),
    FieldSpec("long", ("lon", "long")),
)

Document = Union[str, bytes, ET.Element]


def _strip_namespaces(root: ET.Element) -> ET.Element:
    for element in root.iter():
        if isinstance(element.tag, str) and "}" in element.tag:
            element.tag = element.tag.split("}", 1)[1]
    return root


def parse_document(body: Union[str, bytes]) -> ET.Element:
    """
    Parse a QRZ response body into an element tree with namespaces removed.

    The live service declares xmlns="http://xmldata.qrz.com"; tags are
    reduced to their local names so lookups work with or without it.
    Bytes are decoded by the parser according to the document's own
    encoding declaration.

    Args:
        body: Raw XML response body, as bytes or already-decoded text

    Returns:
        Root element of the document

    Raises:
        XMLParseError: If the body is not well-formed XML
    """
    if isinstance(body, str):
        # Text is already decoded, so its declared encoding no longer applies
        body = _XML_DECLARATION.sub("", body, count=1)
    try:
        root = ET.fromstring(body)
    except ET.ParseError as e:
        raise XMLParseError(f"Malformed XML response: {e}") from e
    return _strip_namespaces(root)


def _database(document: Document) -> Optional[ET.Element]:
    if isinstance(document, ET.Element):
        # Work on a copy; the caller's tree keeps its namespaced tags
        root = _strip_namespaces(copy.deepcopy(document))
    else:
        root = parse_document(document)
    if root.tag == ROOT_TAG:
        return root
    return root.find(f".//{ROOT_TAG}")


def extract_fields(element: Optional[ET.Element], specs: Tuple[FieldSpec, ...]) -> Dict[str, Optional[str]]:
    """
    Read the fields named by a spec table from one element.

    Required fields take the first matching child's text and default to "".
    Optional fields stay None when the element is absent or empty.
    """
    values = {}
    for spec in specs:
        value = None
        if element is not None:
            for tag in spec.tags:
                child = element.find(tag)
                if child is not None:
                    value = child.text or ""
                    break
        if spec.optional:
            values[spec.name] = value or None
        else:
            values[spec.name] = value if value is not None else ""
    return values


def extract_session(document: Document) -> Session:
    """
    Extract the Session record from a response.

    A document without QRZDatabase/Session yields an empty Session whose
    error is None, which classifies as success.
    """
    database = _database(document)
    element = database.find("Session") if database is not None else None
    if element is None:
        logger.warning("QRZ response has no QRZDatabase/Session element")
    return Session(**extract_fields(element, SESSION_FIELDS))


def extract_callsign(document: Document) -> Callsign:
    """Extract the Callsign record; all fields are empty when it is absent."""
    database = _database(document)
    element = database.find("Callsign") if database is not None else None
    return Callsign(**extract_fields(element, CALLSIGN_FIELDS))


def extract_dxcc_entities(document: Document) -> List[DXCCEntity]:
    """Extract every DXCC element in document order."""
    database = _database(document)
    if database is None:
        return []
    return [DXCCEntity(**extract_fields(element, DXCC_FIELDS)) for element in database.findall("DXCC")]

