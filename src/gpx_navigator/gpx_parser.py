# gpx_parser.py
# Turns GPX text into a normalized ParsedRoute.
# Depends only on: models, errors. Nothing else from this project.

import logging
import math
import xml.sax as sax
from typing import Any, Dict, List, Optional

from .errors import DocumentDecodeFailure, NoPointsFound
from .models import GeoPoint, ParsedRoute

logger = logging.getLogger(__name__)

TEXT_KEY = "#text"


# ---------------------------------------------------------------------------
# SAX content handler, builds a nested attribute/element tree
# ---------------------------------------------------------------------------

def _local(name: str) -> str:
    """Drop any namespace prefix ("gpx:trkpt" -> "trkpt")."""
    return name.rsplit(":", 1)[-1]


class GPXTreeHandler(sax.ContentHandler):
    """
    Stream-parse an XML document into nested dicts.

    Attributes and child elements share one dict per element, keyed by local
    name. Repeated children collapse into a list in document order. An element
    with only text becomes that (stripped) string.
    """

    def __init__(self) -> None:
        super().__init__()
        self.root: Dict[str, Any] = {}
        self._stack: List[Dict[str, Any]] = [self.root]
        self._names: List[str] = []
        self._text: List[List[str]] = []

    def startElement(self, name: str, attrs) -> None:  # type: ignore[override]
        node: Dict[str, Any] = {}
        for key in attrs.getNames():
            if key == "xmlns" or key.startswith("xmlns:"):
                continue
            node[_local(key)] = attrs[key]
        self._stack.append(node)
        self._names.append(_local(name))
        self._text.append([])

    def characters(self, content: str) -> None:
        if self._text:
            self._text[-1].append(content)

    def endElement(self, name: str) -> None:  # type: ignore[override]
        node = self._stack.pop()
        key = self._names.pop()
        text = "".join(self._text.pop()).strip()

        value: Any = node
        if not node:
            value = text
        elif text:
            node[TEXT_KEY] = text

        parent = self._stack[-1]
        if key not in parent:
            parent[key] = value
        elif isinstance(parent[key], list):
            parent[key].append(value)
        else:
            parent[key] = [parent[key], value]


def decode_document(xml_text: str) -> Dict[str, Any]:
    """
    Decode XML text into a nested dict tree.

    Args:
        xml_text: Raw document text.

    Returns:
        Dict keyed by the root element's local name.

    Raises:
        DocumentDecodeFailure: If the text is not well-formed XML.
    """
    if xml_text.startswith("\ufeff"):
        xml_text = xml_text[1:]
    handler = GPXTreeHandler()
    try:
        sax.parseString(xml_text, handler)
    except sax.SAXException as e:
        raise DocumentDecodeFailure(f"Invalid XML: {e}") from e
    return handler.root


# ---------------------------------------------------------------------------
# Tolerant tree lookups
# ---------------------------------------------------------------------------

def _as_list(value: Any) -> List[Any]:
    if value is None or value == "":
        return []
    return value if isinstance(value, list) else [value]


def _child(node: Any, key: str) -> Any:
    return node.get(key) if isinstance(node, dict) else None


def _first(node: Any, key: str) -> Any:
    items = _as_list(_child(node, key))
    return items[0] if items else None


def _text(value: Any) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        value = value.get(TEXT_KEY)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _coerce(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    # float() accepts "4_5"; GPX coordinates never use digit separators
    if isinstance(value, str) and "_" in value:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _points(elements: List[Any]) -> List[GeoPoint]:
    """Keep the points whose lat/lon are finite numbers, in order."""
    points: List[GeoPoint] = []
    for el in elements:
        lat = _coerce(_child(el, "lat"))
        lon = _coerce(_child(el, "lon"))
        if lat is None or lon is None:
            continue
        points.append(GeoPoint(lat, lon))
    return points


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_gpx(document: Dict[str, Any]) -> ParsedRoute:
    """
    Extract the route from a decoded GPX tree.

    Uses the first track's first segment when it has any usable point,
    otherwise the first route's points. Never raises on a decoded tree; an
    empty point list is left for the caller to reject.

    Args:
        document: Tree returned by decode_document().

    Returns:
        ParsedRoute with optional name and ordered points.
    """
    gpx = _child(document, "gpx")

    name = (
        _text(_child(_first(gpx, "metadata"), "name"))
        or _text(_child(_first(gpx, "trk"), "name"))
        or _text(_child(_first(gpx, "rte"), "name"))
    )

    trk = _first(gpx, "trk")
    seg = _first(trk, "trkseg")
    points = _points(_as_list(_child(seg, "trkpt")))
    if points:
        return ParsedRoute(name=name, points=points)

    rte = _first(gpx, "rte")
    return ParsedRoute(name=name, points=_points(_as_list(_child(rte, "rtept"))))


def load_gpx(xml_text: str) -> ParsedRoute:
    """
    Decode and parse GPX text, rejecting documents without usable points.

    Raises:
        DocumentDecodeFailure: Malformed XML.
        NoPointsFound:         Well-formed, but no track or route points.
    """
    route = parse_gpx(decode_document(xml_text))
    if route.is_empty:
        raise NoPointsFound()
    logger.debug(f"Parsed GPX '{route.name}' with {len(route.points)} points.")
    return route


def read_text_file(path: str) -> str:
    """Default raw-text reader for a picked document."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()
