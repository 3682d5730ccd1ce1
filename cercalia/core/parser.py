"""
Cercalia response parsing helpers.

The vendor JSON is a straight translation of its XML output, so one logical
field can show up in several shapes:

    {"@id": "08019"}                     attribute with "@" prefix
    {"id": "08019"}                      attribute without prefix
    {"value": "Barcelona"}               wrapped text value
    {"$valor": "Barcelona"}              wrapped text value (legacy)
    "Barcelona"                          plain text

Single-element lists are often collapsed into a plain object as well.

Services do not poke at these shapes directly. They describe every field as
an ordered list of extraction strategies and let extractFirst() pick the
first one that yields something:

    name = extractFirst(
        candidate,
        valueAt("ge", "name"),
        attrAt("name"),
        attrAt("desc"),
        default="Unknown",
    )
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .models import Coordinate

logger = logging.getLogger(__name__)

# A strategy takes a response node and returns the extracted text or None
Extractor = Callable[[Any], Optional[str]]

VALUE_KEYS = ("$valor", "value", "@value")


def isScalar(node: Any) -> bool:
    """Check if node is a JSON scalar (string, number or boolean)."""
    return isinstance(node, (str, int, float, bool))


def asText(node: Any) -> Optional[str]:
    """Convert JSON scalar to text, booleans in lower case like the vendor sends them."""
    if node is None:
        return None
    if isinstance(node, bool):
        return "true" if node else "false"
    if isScalar(node):
        return str(node)
    return None


def getCercaliaAttr(node: Any, key: str) -> Optional[str]:
    """Get attribute value, trying "@key" first and then plain "key".

    Args:
        node: Response node (usually dict)
        key: Attribute name without "@" prefix

    Returns:
        Attribute text or None if node has no such attribute
    """
    if not isinstance(node, dict):
        return None

    attrNode = node.get(f"@{key}")
    if attrNode is not None:
        return asText(attrNode)

    attrNode = node.get(key)
    if attrNode is not None and isScalar(attrNode):
        return asText(attrNode)

    return None


def getCercaliaValue(node: Any) -> Optional[str]:
    """Get text value of node.

    Plain scalars are returned as is, objects are checked for
    "$valor", "value" and "@value" keys (in that order).
    """
    if node is None:
        return None
    if isScalar(node):
        return asText(node)
    if not isinstance(node, dict):
        return None

    for key in VALUE_KEYS:
        valueNode = node.get(key)
        if valueNode is not None:
            return asText(valueNode)

    return None


def getPath(node: Any, *keys: str) -> Any:
    """Walk nested dicts, returning None as soon as a key is missing."""
    current = node
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def asList(node: Any) -> List[Any]:
    """Normalize "list or single object" nodes into a list.

    None becomes an empty list, a single object becomes a list of one.
    """
    if node is None:
        return []
    if isinstance(node, list):
        return [item for item in node if item is not None]
    return [node]


def firstElement(node: Any) -> Any:
    """Get first element of a "list or single object" node or None."""
    items = asList(node)
    return items[0] if items else None


def parseCoordinate(value: Optional[str], name: str) -> float:
    """Parse required coordinate component.

    Raises:
        ValueError: If value is empty or not a number
    """
    if value is None or not value.strip():
        raise ValueError(f"{name} coordinate cannot be null or empty")
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"Invalid {name} coordinate: {value}") from e


def parseFloatOrNone(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parseIntOrNone(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        return None


# Extraction strategies


def attrAt(*path: str) -> Extractor:
    """Strategy: attribute at the end of path, e.g. attrAt("ge", "id") reads ge.@id."""
    *nodePath, key = path

    def extract(node: Any) -> Optional[str]:
        return getCercaliaAttr(getPath(node, *nodePath), key)

    return extract


def valueAt(*path: str) -> Extractor:
    """Strategy: text value of the node at path, e.g. valueAt("ge", "name")."""

    def extract(node: Any) -> Optional[str]:
        return getCercaliaValue(getPath(node, *path))

    return extract


def matching(strategy: Extractor, predicate: Callable[[str], bool]) -> Extractor:
    """Strategy wrapper: accept the extracted text only if predicate holds."""

    def extract(node: Any) -> Optional[str]:
        value = strategy(node)
        if value is not None and predicate(value):
            return value
        return None

    return extract


def extractFirst(node: Any, *strategies: Extractor, default: Optional[str] = None) -> Optional[str]:
    """Evaluate strategies in priority order and return the first non-empty result.

    Empty strings count as missing, so a later strategy gets a chance.
    """
    for strategy in strategies:
        value = strategy(node)
        if value:
            return value
    return default


def getCodeNamePair(node: Any, key: str) -> Tuple[Optional[str], Optional[str]]:
    """Get (name, code) of an administrative element like {"@id": "08019", "value": "Barcelona"}.

    The code is always read from the same element as the name so
    both halves of the pair stay consistent.
    """
    element = getPath(node, key)
    if element is None:
        return None, None
    return getCercaliaValue(element), getCercaliaAttr(element, "id")


ADMIN_LEVELS = (
    ("city", "locality"),
    ("municipality", "municipality"),
    ("district", "district"),
    ("subregion", "subregion"),
    ("region", "region"),
    ("country", "country"),
)


def getAdminPairs(node: Any, levels: Tuple[Tuple[str, str], ...] = ADMIN_LEVELS) -> Dict[str, Optional[str]]:
    """Extract all administrative (name, code) pairs of a ge node as model kwargs.

    For ge.city this gives {"locality": ..., "localityCode": ...} and so on.
    Missing levels are returned as None, so the dict can be passed to models directly.
    """
    result: Dict[str, Optional[str]] = {}
    for key, fieldName in levels:
        name, code = getCodeNamePair(node, key)
        result[fieldName] = name
        result[f"{fieldName}Code"] = code
    return result


def parseCoordNode(node: Any) -> Coordinate:
    """Parse {"@x": lng, "@y": lat} node into Coordinate.

    Raises:
        ValueError: If node is missing or x/y are missing or invalid
    """
    if node is None:
        raise ValueError("coordinates are missing")
    lat = parseCoordinate(getCercaliaAttr(node, "y"), "latitude")
    lng = parseCoordinate(getCercaliaAttr(node, "x"), "longitude")
    return Coordinate(lat=lat, lng=lng)
