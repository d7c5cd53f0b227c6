"""Error entries and the standard output formats.

Three shapes are supported, following the JSON Schema output formats:

- ``flag``: only the boolean verdict;
- ``basic``: a flat list of error entries in evaluation order;
- ``detailed``: the error entries as a tree, nested under the schema that
  applied the failing keyword.
"""

import json
from typing import Any, Dict, List, Optional

OUTPUT_FORMATS = ('flag', 'basic', 'detailed')


class BasicErrorEntry:
    """A single failed keyword, with schema and instance locations."""

    def __init__(self, keyword_location: str, absolute_keyword_location: Optional[str],
                 instance_location: str, error: str, errors: Optional[List['BasicErrorEntry']] = None):
        self.keyword_location = keyword_location
        self.absolute_keyword_location = absolute_keyword_location
        self.instance_location = instance_location
        self.error = error
        self.errors = errors or []

    def flatten(self) -> List['BasicErrorEntry']:
        """Return this entry and all nested entries in pre-order, without nesting."""
        result = [BasicErrorEntry(self.keyword_location, self.absolute_keyword_location,
                                  self.instance_location, self.error)]
        for nested in self.errors:
            result.extend(nested.flatten())
        return result

    def to_dict(self, nested: bool = False) -> Dict[str, Any]:
        """Serialise to the camelCase shape of the output formats."""
        result: Dict[str, Any] = {'keywordLocation': self.keyword_location}
        if self.absolute_keyword_location is not None:
            result['absoluteKeywordLocation'] = self.absolute_keyword_location
        result['instanceLocation'] = self.instance_location
        result['error'] = self.error
        if nested and self.errors:
            result['errors'] = [e.to_dict(nested=True) for e in self.errors]
        return result

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BasicErrorEntry) and \
            self.keyword_location == other.keyword_location and \
            self.absolute_keyword_location == other.absolute_keyword_location and \
            self.instance_location == other.instance_location and \
            self.error == other.error and self.errors == other.errors

    def __hash__(self) -> int:
        return hash((self.keyword_location, self.absolute_keyword_location, self.instance_location, self.error))

    def __str__(self) -> str:
        return f"{self.instance_location}: {self.error}"

    def __repr__(self) -> str:
        return f"BasicErrorEntry(keyword_location={self.keyword_location!r}, " \
               f"instance_location={self.instance_location!r}, error={self.error!r})"


class BasicOutput:
    """Result of ``validate_basic``: the verdict and a flat list of errors."""

    def __init__(self, valid: bool, errors: Optional[List[BasicErrorEntry]] = None):
        self.valid = valid
        self.errors = errors

    @classmethod
    def from_entry(cls, entry: Optional[BasicErrorEntry]) -> 'BasicOutput':
        if entry is None:
            return cls(True)
        return cls(False, entry.flatten())

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'valid': self.valid}
        if self.errors:
            result['errors'] = [e.to_dict() for e in self.errors]
        return result

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"BasicOutput(valid={self.valid}, errors={self.errors})"


class DetailedOutput:
    """Result of ``validate_detailed``: the verdict and the error tree."""

    def __init__(self, valid: bool, error: Optional[BasicErrorEntry] = None):
        self.valid = valid
        self.error = error

    @classmethod
    def from_entry(cls, entry: Optional[BasicErrorEntry]) -> 'DetailedOutput':
        return cls(entry is None, entry)

    @property
    def errors(self) -> List[BasicErrorEntry]:
        return self.error.errors if self.error is not None else []

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'valid': self.valid}
        if self.error is not None:
            result.update(self.error.to_dict(nested=True))
        return result

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"DetailedOutput(valid={self.valid}, error={self.error!r})"


def render_output(schema, instance: Any, output_format: str = 'basic') -> Dict[str, Any]:
    """
    Validate an instance and render the result in one of the standard output formats.

    Args:
        schema (JSONSchema): The compiled schema.
        instance (Any): The JSON value to validate.
        output_format (str): 'flag', 'basic' or 'detailed'.

    Returns:
        dict: The output in the requested shape.
    """
    if output_format == 'flag':
        return {'valid': schema.validate(instance)}
    if output_format == 'basic':
        return schema.validate_basic(instance).to_dict()
    if output_format == 'detailed':
        return schema.validate_detailed(instance).to_dict()
    raise ValueError(f"Unknown output format '{output_format}', expected one of {', '.join(OUTPUT_FORMATS)}")
