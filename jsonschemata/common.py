"""
Common utility functions for jsonschemata.
"""

# pylint: disable=line-too-long

import json
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, List, Optional, Tuple
from urllib.parse import quote, unquote, urldefrag, urljoin, urlparse

from jsonpointer import JsonPointer

ROOT_POINTER = JsonPointer('')

JSON_TYPES = ['null', 'boolean', 'object', 'array', 'number', 'integer', 'string']

# characters allowed in a URI fragment besides the unreserved set
_FRAGMENT_SAFE = "/!$&'()*+,;=:@?"


def child_pointer(pointer: JsonPointer, *steps) -> JsonPointer:
    """Return a pointer extended by the given property names or array indices."""
    return JsonPointer.from_parts(list(pointer.parts) + [str(step) for step in steps])


def pointer_to_fragment(pointer: JsonPointer) -> str:
    """Render a pointer in URI fragment form, e.g. ``#/properties/aaa``."""
    return '#' + quote(pointer.path, safe=_FRAGMENT_SAFE)


def registry_key(uri: Optional[str], fragment: str) -> str:
    """Build the key under which a compiled schema is registered."""
    return f"{uri or ''}#{fragment}"


def resolve_uri(base_uri: Optional[str], ref: str) -> str:
    """
    Resolve a (possibly relative) URI reference against a base URI.

    Args:
        base_uri (str | None): The base URI, without fragment.
        ref (str): The reference to resolve.

    Returns:
        str: The resolved URI, fragment included.
    """
    if urlparse(ref).scheme:
        return ref
    if ref.startswith('#'):
        return (base_uri or '') + ref
    if not base_uri:
        return ref
    return urljoin(base_uri, ref)


def split_uri(uri: str) -> Tuple[str, str]:
    """Split a URI into the document URI and the unquoted fragment."""
    document, fragment = urldefrag(uri)
    return document, unquote(fragment)


def strip_fragment(uri: Optional[str]) -> Optional[str]:
    """Drop the fragment (and a trailing empty fragment) from a URI."""
    if uri is None:
        return None
    return urldefrag(uri)[0] or None


def is_number(value: Any) -> bool:
    """JSON numbers; booleans are not numbers."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_integer(value: Any) -> bool:
    """JSON integers are numbers with a zero fractional part."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON number to a Decimal without binary rounding artefacts."""
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f'Not a number: {value!r}') from e


def is_multiple_of(number: Decimal, divisor: Decimal) -> bool:
    """Exact multipleOf test; precision grows with the magnitude of the quotient."""
    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() - divisor.adjusted() + 28)
        return number % divisor == 0


def json_type(value: Any) -> str:
    """Return the JSON type name of a Python JSON value."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, dict):
        return 'object'
    if isinstance(value, (list, tuple)):
        return 'array'
    if isinstance(value, str):
        return 'string'
    if is_integer(value):
        return 'integer'
    if is_number(value):
        return 'number'
    return type(value).__name__


def json_equals(value1: Any, value2: Any) -> bool:
    """
    Structural equality of two JSON values.

    Numbers compare by value regardless of representation (``1 == 1.0``),
    booleans never equal numbers, objects compare by key set and values.
    """
    if isinstance(value1, bool) or isinstance(value2, bool):
        return isinstance(value1, bool) and isinstance(value2, bool) and value1 == value2
    if is_number(value1) and is_number(value2):
        return to_decimal(value1) == to_decimal(value2)
    if isinstance(value1, dict) and isinstance(value2, dict):
        if value1.keys() != value2.keys():
            return False
        return all(json_equals(value1[k], value2[k]) for k in value1)
    if isinstance(value1, (list, tuple)) and isinstance(value2, (list, tuple)):
        if len(value1) != len(value2):
            return False
        return all(json_equals(a, b) for a, b in zip(value1, value2))
    if type(value1) is not type(value2):
        return False
    return value1 == value2


def json_string(value: Any) -> str:
    """Render a JSON value for error messages."""
    return json.dumps(value, ensure_ascii=False, default=str)


def canonical_json(value: Any) -> str:
    """A stable text form of a JSON value, used for structural hashing."""
    return json.dumps(value, sort_keys=True, default=str)


def find_duplicates(values: List[Any]) -> Optional[Tuple[int, int]]:
    """Return the indices of the first pair of structurally equal values."""
    for i, value1 in enumerate(values):
        for j in range(i + 1, len(values)):
            if json_equals(value1, values[j]):
                return i, j
    return None


# ECMA-262 shorthand classes are ASCII only; (outside a class, inside a class)
_ECMA_CLASS_ESCAPES = {
    'd': ('[0-9]', '0-9'),
    'w': ('[A-Za-z0-9_]', 'A-Za-z0-9_'),
    'D': ('[^0-9]', None),
    'W': ('[^A-Za-z0-9_]', None),
}


def ecma_regex(pattern: str) -> str:
    """
    Rewrite an ECMA-262 regular expression for Python's ``re``.

    ``$`` outside a character class matches only at the very end of the
    string, and ``\\d`` and ``\\w`` match ASCII characters only, as in
    ECMA-262. Everything else is passed through.
    """
    result = []
    in_class = False
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == '\\' and i + 1 < len(pattern):
            replacement = _ECMA_CLASS_ESCAPES.get(pattern[i + 1], (None, None))[1 if in_class else 0]
            result.append(replacement if replacement is not None else pattern[i:i + 2])
            i += 2
            continue
        if in_class:
            if char == ']':
                in_class = False
        elif char == '[':
            in_class = True
        elif char == '$':
            char = r'\Z'
        result.append(char)
        i += 1
    return ''.join(result)
