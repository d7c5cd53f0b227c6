"""Compiled schema nodes and the evaluation contract.

A compiled schema is a tree of ``JSONSchema`` nodes. Each node knows its own
location (base URI plus JSON Pointer from the resource root) and implements
two operations:

- ``validate(json, instance_location)`` returns a boolean and stops at the
  first failure;
- ``get_error_entry(relative_location, json, instance_location)`` walks the
  whole subtree and returns ``None`` or a ``BasicErrorEntry`` describing
  every failure below it.

``json`` is always the root of the instance document and
``instance_location`` points at the value under test. ``relative_location``
is the keyword path taken from the root of the schema being evaluated, which
differs from the node's own location once a ``$ref`` has been followed.

Nodes are not modified after the parser returns them, so a compiled tree can
be evaluated from several threads at once.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from jsonpointer import JsonPointer

from jsonschemata.common import ROOT_POINTER, child_pointer, pointer_to_fragment, registry_key
from jsonschemata.output import BasicErrorEntry, BasicOutput, DetailedOutput

SUB_SCHEMA_ERROR_MESSAGE = 'A subschema had errors'
FALSE_SCHEMA_ERROR_MESSAGE = 'schema is boolean false'
NOT_SCHEMA_ERROR_MESSAGE = 'must not validate against schema'


class SchemaError(Exception):
    """Raised when a schema document cannot be compiled."""

    def __init__(self, message: str, location: Optional[str] = None):
        self.message = message
        self.location = location
        super().__init__(f"{message} at {location}" if location else message)


class JSONSchema:
    """Base class of all compiled schema nodes."""

    def __init__(self, uri: Optional[str], location: JsonPointer):
        self.uri = uri
        self.location = location

    @property
    def absolute_location(self) -> Optional[str]:
        """The node's location as an absolute URI, or None for anonymous documents."""
        if self.uri is None:
            return None
        return self.uri + pointer_to_fragment(self.location)

    @property
    def key(self) -> str:
        """The registry key of this node."""
        return registry_key(self.uri, self.location.path)

    def child_location(self, pointer: JsonPointer) -> JsonPointer:
        """The keyword location of this node, given the location of the schema containing it."""
        parts = self.location.parts
        return child_pointer(pointer, parts[-1]) if parts else pointer

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        raise NotImplementedError

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        raise NotImplementedError

    def validate_basic(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> BasicOutput:
        """Validate and report every failing keyword as a flat list."""
        return BasicOutput.from_entry(self.get_error_entry(ROOT_POINTER, json, instance_location))

    def validate_detailed(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> DetailedOutput:
        """Validate and report failures as a tree."""
        return DetailedOutput.from_entry(self.get_error_entry(ROOT_POINTER, json, instance_location))

    def create_error_entry(self, relative_location: JsonPointer, instance_location: JsonPointer, error: str,
                           errors: Optional[List[BasicErrorEntry]] = None) -> BasicErrorEntry:
        return BasicErrorEntry(
            keyword_location=pointer_to_fragment(relative_location),
            absolute_keyword_location=self.absolute_location,
            instance_location=pointer_to_fragment(instance_location),
            error=error,
            errors=errors)

    def combine_error_entries(self, relative_location: JsonPointer, instance_location: JsonPointer,
                              errors: List[BasicErrorEntry]) -> Optional[BasicErrorEntry]:
        """Collapse the errors of an applicator into zero or one entry."""
        if not errors:
            return None
        if len(errors) == 1:
            return errors[0]
        return self.create_error_entry(relative_location, instance_location, SUB_SCHEMA_ERROR_MESSAGE, errors)

    def _key(self) -> tuple:
        return (self.uri, tuple(self.location.parts))

    def __eq__(self, other: object) -> bool:
        return self is other or (type(other) is type(self) and self._key() == other._key())

    def __hash__(self) -> int:
        return hash((type(self).__name__,) + self._key())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.absolute_location or pointer_to_fragment(self.location)})"


class Validator(JSONSchema):
    """
    A leaf assertion keyword.

    Subclasses implement ``test`` (the predicate) and ``explain`` (the error
    message when the predicate fails, otherwise None). Both receive the
    instance value itself rather than the document and pointer.
    """

    def test(self, instance: Any) -> bool:
        raise NotImplementedError

    def explain(self, instance: Any) -> Optional[str]:
        raise NotImplementedError

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        return self.test(instance_location.resolve(json))

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        message = self.explain(instance_location.resolve(json))
        if message is None:
            return None
        return self.create_error_entry(relative_location, instance_location, message)


class SubSchema(JSONSchema):
    """A schema object: the conjunction of its keywords, in document order."""

    def __init__(self, uri: Optional[str], location: JsonPointer, children: List[JSONSchema],
                 schema_version: Optional[str] = None, title: Optional[str] = None,
                 description: Optional[str] = None):
        super().__init__(uri, location)
        self.children = children
        self.schema_version = schema_version
        self.title = title
        self.description = description

    def child_location(self, pointer: JsonPointer) -> JsonPointer:
        return pointer

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        return all(child.validate(json, instance_location) for child in self.children)

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        errors = []
        for child in self.children:
            entry = child.get_error_entry(child.child_location(relative_location), json, instance_location)
            if entry is not None:
                errors.append(entry)
        if not errors:
            return None
        return self.create_error_entry(relative_location, instance_location, SUB_SCHEMA_ERROR_MESSAGE, errors)

    def _key(self) -> tuple:
        return super()._key() + (tuple(self.children),)


class TrueSchema(JSONSchema):
    """The boolean schema ``true``: accepts everything."""

    def child_location(self, pointer: JsonPointer) -> JsonPointer:
        return pointer

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        return True

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        return None


class FalseSchema(JSONSchema):
    """The boolean schema ``false``: rejects everything."""

    def child_location(self, pointer: JsonPointer) -> JsonPointer:
        return pointer

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        return False

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        return self.create_error_entry(relative_location, instance_location, FALSE_SCHEMA_ERROR_MESSAGE)


class NotSchema(JSONSchema):
    """``not``: passes iff the nested schema fails."""

    def __init__(self, uri: Optional[str], location: JsonPointer, nested: JSONSchema):
        super().__init__(uri, location)
        self.nested = nested

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        return not self.nested.validate(json, instance_location)

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        if not self.nested.validate(json, instance_location):
            return None
        return self.create_error_entry(relative_location, instance_location, NOT_SCHEMA_ERROR_MESSAGE)

    def _key(self) -> tuple:
        return super()._key() + (self.nested,)


class CombinationSchema(JSONSchema):
    """``allOf``, ``anyOf`` and ``oneOf`` over an ordered list of schemas."""

    class CombinationType(Enum):
        ALL_OF = 'allOf'
        ANY_OF = 'anyOf'
        ONE_OF = 'oneOf'

        @property
        def keyword(self) -> str:
            return self.value

    def __init__(self, uri: Optional[str], location: JsonPointer, combination: 'CombinationSchema.CombinationType',
                 schemas: List[JSONSchema]):
        super().__init__(uri, location)
        self.combination = combination
        self.schemas = schemas

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        if self.combination is self.CombinationType.ALL_OF:
            return all(schema.validate(json, instance_location) for schema in self.schemas)
        if self.combination is self.CombinationType.ANY_OF:
            return any(schema.validate(json, instance_location) for schema in self.schemas)
        matches = 0
        for schema in self.schemas:
            if schema.validate(json, instance_location):
                matches += 1
                if matches > 1:
                    return False
        return matches == 1

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        keyword = self.combination.keyword
        errors = []
        matches = 0
        for i, schema in enumerate(self.schemas):
            entry = schema.get_error_entry(child_pointer(relative_location, i), json, instance_location)
            if entry is None:
                matches += 1
                if self.combination is self.CombinationType.ANY_OF:
                    return None
            else:
                errors.append(entry)
        if self.combination is self.CombinationType.ALL_OF:
            if not errors:
                return None
            return self.create_error_entry(relative_location, instance_location,
                                           f'Combination schema "{keyword}" has errors', errors)
        if self.combination is self.CombinationType.ONE_OF:
            if matches == 1:
                return None
            if matches > 1:
                return self.create_error_entry(relative_location, instance_location,
                                               f'Combination schema "{keyword}" has {matches} matches, expected exactly 1')
        return self.create_error_entry(relative_location, instance_location,
                                       f'Combination schema "{keyword}" has no matches', errors)

    def _key(self) -> tuple:
        return super()._key() + (self.combination, tuple(self.schemas))


class IfThenElseSchema(JSONSchema):
    """
    ``if``/``then``/``else``. The ``if`` schema is only a probe; its own
    failures are never reported. A missing branch is vacuously satisfied.
    """

    def __init__(self, uri: Optional[str], location: JsonPointer, if_schema: JSONSchema,
                 then_schema: Optional[JSONSchema], else_schema: Optional[JSONSchema]):
        super().__init__(uri, location)
        self.if_schema = if_schema
        self.then_schema = then_schema
        self.else_schema = else_schema

    def child_location(self, pointer: JsonPointer) -> JsonPointer:
        # the branches are siblings of "if", so they are addressed from the enclosing schema
        return pointer

    def _branch(self, json: Any, instance_location: JsonPointer):
        if self.if_schema.validate(json, instance_location):
            return 'then', self.then_schema
        return 'else', self.else_schema

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        _, branch = self._branch(json, instance_location)
        return branch is None or branch.validate(json, instance_location)

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        keyword, branch = self._branch(json, instance_location)
        if branch is None:
            return None
        return branch.get_error_entry(child_pointer(relative_location, keyword), json, instance_location)

    def _key(self) -> tuple:
        return super()._key() + (self.if_schema, self.then_schema, self.else_schema)


class RefSchema(JSONSchema):
    """
    ``$ref`` (and the dynamic reference keywords). Holds the registry key of
    its target and looks the target up on every evaluation, which allows
    self-referential and mutually referential schemas.

    Errors from the target keep the keyword location of the path through
    this reference; their absolute location is that of the target.
    """

    def __init__(self, uri: Optional[str], location: JsonPointer, target_key: str,
                 registry: Dict[str, JSONSchema], ref: str):
        super().__init__(uri, location)
        self.target_key = target_key
        self.registry = registry
        self.ref = ref

    @property
    def target(self) -> JSONSchema:
        try:
            return self.registry[self.target_key]
        except KeyError:
            raise RuntimeError(f"Reference {self.ref} at {self.absolute_location or self.location.path} "
                               f"was never resolved") from None

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        return self.target.validate(json, instance_location)

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        return self.target.get_error_entry(relative_location, json, instance_location)

    def _key(self) -> tuple:
        # compare by target key only; following the target could recurse forever
        return super()._key() + (self.target_key,)
