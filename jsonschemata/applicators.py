"""Applicator keywords: schemas applied to the members and elements of an instance.

Single-schema applicators (``items``, ``additionalProperties``, ``contains``)
share their keyword location with the nested schema, so the nested schema is
evaluated with the applicator's own relative location. Applicators holding
several schemas address each one by property name, pattern or index.
"""

from typing import Any, Dict, List, Optional, Pattern, Tuple

from jsonpointer import JsonPointer

from jsonschemata.common import ROOT_POINTER, canonical_json, child_pointer
from jsonschemata.output import BasicErrorEntry
from jsonschemata.schema import JSONSchema


class PropertiesSchema(JSONSchema):
    """``properties``: named schemas applied to the matching members only."""

    def __init__(self, uri: Optional[str], location: JsonPointer, properties: Dict[str, JSONSchema]):
        super().__init__(uri, location)
        self.properties = properties

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return True
        for name, schema in self.properties.items():
            if name in instance and not schema.validate(json, child_pointer(instance_location, name)):
                return False
        return True

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return None
        errors = []
        for name, schema in self.properties.items():
            if name in instance:
                entry = schema.get_error_entry(child_pointer(relative_location, name), json,
                                               child_pointer(instance_location, name))
                if entry is not None:
                    errors.append(entry)
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (tuple(self.properties.items()),)


class PatternPropertiesSchema(JSONSchema):
    """``patternProperties``: each schema applies to every member whose name matches its pattern."""

    def __init__(self, uri: Optional[str], location: JsonPointer,
                 patterns: List[Tuple[str, Pattern, JSONSchema]]):
        super().__init__(uri, location)
        self.patterns = patterns

    def _matches(self, instance: dict):
        for pattern, regex, schema in self.patterns:
            for name in instance:
                if regex.search(name):
                    yield pattern, name, schema

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return True
        return all(schema.validate(json, child_pointer(instance_location, name))
                   for _, name, schema in self._matches(instance))

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return None
        errors = []
        for pattern, name, schema in self._matches(instance):
            entry = schema.get_error_entry(child_pointer(relative_location, pattern), json,
                                           child_pointer(instance_location, name))
            if entry is not None:
                errors.append(entry)
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (tuple((pattern, schema) for pattern, _, schema in self.patterns),)


class AdditionalPropertiesSchema(JSONSchema):
    """``additionalProperties``: applies to members matched by neither ``properties`` nor ``patternProperties``."""

    def __init__(self, uri: Optional[str], location: JsonPointer, schema: JSONSchema,
                 property_names: List[str], patterns: List[Pattern]):
        super().__init__(uri, location)
        self.schema = schema
        self.property_names = property_names
        self.patterns = patterns

    def _additional(self, instance: dict) -> List[str]:
        return [name for name in instance
                if name not in self.property_names and not any(p.search(name) for p in self.patterns)]

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return True
        return all(self.schema.validate(json, child_pointer(instance_location, name))
                   for name in self._additional(instance))

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return None
        errors = []
        for name in self._additional(instance):
            entry = self.schema.get_error_entry(relative_location, json, child_pointer(instance_location, name))
            if entry is not None:
                errors.append(entry)
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (self.schema, tuple(self.property_names),
                                 tuple(p.pattern for p in self.patterns))


class PropertyNamesSchema(JSONSchema):
    """``propertyNames``: every member name, taken as a string instance, must match the schema."""

    def __init__(self, uri: Optional[str], location: JsonPointer, schema: JSONSchema):
        super().__init__(uri, location)
        self.schema = schema

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return True
        return all(self.schema.validate(name) for name in instance)

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return None
        errors = [self.create_error_entry(relative_location, child_pointer(instance_location, name),
                                          f"Property name \"{name}\" fails propertyNames check")
                  for name in instance if not self.schema.validate(name)]
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (self.schema,)


class ItemsSchema(JSONSchema):
    """
    A single schema applied to every array element from ``start_index`` on.

    Used for ``items`` (after any ``prefixItems``) and for the draft-07
    ``additionalItems``.
    """

    def __init__(self, uri: Optional[str], location: JsonPointer, schema: JSONSchema, start_index: int = 0):
        super().__init__(uri, location)
        self.schema = schema
        self.start_index = start_index

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, list):
            return True
        return all(self.schema.validate(json, child_pointer(instance_location, i))
                   for i in range(self.start_index, len(instance)))

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, list):
            return None
        errors = []
        for i in range(self.start_index, len(instance)):
            entry = self.schema.get_error_entry(relative_location, json, child_pointer(instance_location, i))
            if entry is not None:
                errors.append(entry)
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (self.schema, self.start_index)


class PrefixItemsSchema(JSONSchema):
    """Positional schemas: ``prefixItems``, or the array form of ``items`` in older drafts."""

    def __init__(self, uri: Optional[str], location: JsonPointer, schemas: List[JSONSchema]):
        super().__init__(uri, location)
        self.schemas = schemas

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, list):
            return True
        return all(schema.validate(json, child_pointer(instance_location, i))
                   for i, schema in enumerate(self.schemas[:len(instance)]))

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, list):
            return None
        errors = []
        for i, schema in enumerate(self.schemas[:len(instance)]):
            entry = schema.get_error_entry(child_pointer(relative_location, i), json,
                                           child_pointer(instance_location, i))
            if entry is not None:
                errors.append(entry)
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (tuple(self.schemas),)


class ContainsSchema(JSONSchema):
    """``contains`` with its ``minContains`` and ``maxContains`` bounds."""

    def __init__(self, uri: Optional[str], location: JsonPointer, schema: JSONSchema,
                 min_contains: int = 1, max_contains: Optional[int] = None):
        super().__init__(uri, location)
        self.schema = schema
        self.min_contains = min_contains
        self.max_contains = max_contains

    def _count(self, json: Any, instance_location: JsonPointer, instance: list) -> int:
        return sum(1 for i in range(len(instance))
                   if self.schema.validate(json, child_pointer(instance_location, i)))

    def _explain(self, count: int) -> Optional[str]:
        if count < self.min_contains:
            return f"Array fails contains check: minContains {self.min_contains}, was {count}"
        if self.max_contains is not None and count > self.max_contains:
            return f"Array fails contains check: maxContains {self.max_contains}, was {count}"
        return None

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, list):
            return True
        return self._explain(self._count(json, instance_location, instance)) is None

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, list):
            return None
        message = self._explain(self._count(json, instance_location, instance))
        if message is None:
            return None
        return self.create_error_entry(relative_location, instance_location, message)

    def _key(self) -> tuple:
        return super()._key() + (self.schema, self.min_contains, self.max_contains)


class DependentSchemasSchema(JSONSchema):
    """``dependentSchemas``: when a member is present the whole object must match its schema."""

    def __init__(self, uri: Optional[str], location: JsonPointer, dependencies: Dict[str, JSONSchema]):
        super().__init__(uri, location)
        self.dependencies = dependencies

    def validate(self, json: Any, instance_location: JsonPointer = ROOT_POINTER) -> bool:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return True
        return all(schema.validate(json, instance_location)
                   for name, schema in self.dependencies.items() if name in instance)

    def get_error_entry(self, relative_location: JsonPointer, json: Any,
                        instance_location: JsonPointer) -> Optional[BasicErrorEntry]:
        instance = instance_location.resolve(json)
        if not isinstance(instance, dict):
            return None
        errors = []
        for name, schema in self.dependencies.items():
            if name in instance:
                entry = schema.get_error_entry(child_pointer(relative_location, name), json, instance_location)
                if entry is not None:
                    errors.append(entry)
        return self.combine_error_entries(relative_location, instance_location, errors)

    def _key(self) -> tuple:
        return super()._key() + (canonical_json(sorted(self.dependencies)), tuple(self.dependencies.values()))
