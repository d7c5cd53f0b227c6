"""Leaf validators: the assertion keywords of the validation vocabulary.

Each validator applies to one kind of instance only and passes every
instance of another type; checking the type is the job of ``type``.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Pattern

from jsonpointer import JsonPointer

from jsonschemata.common import (canonical_json, find_duplicates, is_multiple_of, is_number, json_equals,
                                 json_string, json_type, to_decimal)
from jsonschemata.schema import Validator


class TypeValidator(Validator):
    """``type``: the instance must be one of the listed JSON types."""

    def __init__(self, uri: Optional[str], location: JsonPointer, types: List[str]):
        super().__init__(uri, location)
        self.types = types

    def test(self, instance: Any) -> bool:
        actual = json_type(instance)
        for expected in self.types:
            if expected == actual or (expected == 'number' and actual == 'integer'):
                return True
        return False

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Incorrect type, expected {' or '.join(self.types)}, was {json_type(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (tuple(self.types),)


class NumberValidator(Validator):
    """Numeric bounds and ``multipleOf``."""

    class ValidationType(Enum):
        MULTIPLE_OF = 'multipleOf'
        MAXIMUM = 'maximum'
        EXCLUSIVE_MAXIMUM = 'exclusiveMaximum'
        MINIMUM = 'minimum'
        EXCLUSIVE_MINIMUM = 'exclusiveMinimum'

        @property
        def keyword(self) -> str:
            return self.value

    def __init__(self, uri: Optional[str], location: JsonPointer, condition: 'NumberValidator.ValidationType',
                 value: Any):
        super().__init__(uri, location)
        self.condition = condition
        self.value = value
        self._limit = to_decimal(value)

    def _valid_number(self, instance: Any) -> bool:
        number = to_decimal(instance)
        condition = self.condition
        if condition is self.ValidationType.MULTIPLE_OF:
            return is_multiple_of(number, self._limit)
        if condition is self.ValidationType.MAXIMUM:
            return number <= self._limit
        if condition is self.ValidationType.EXCLUSIVE_MAXIMUM:
            return number < self._limit
        if condition is self.ValidationType.MINIMUM:
            return number >= self._limit
        return number > self._limit

    def test(self, instance: Any) -> bool:
        return not is_number(instance) or self._valid_number(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Number fails check: {self.condition.keyword} {self.value}, was {instance}"

    def _key(self) -> tuple:
        return super()._key() + (self.condition, self._limit)


class StringValidator(Validator):
    """``minLength`` and ``maxLength``, counted in Unicode code points."""

    class ValidationType(Enum):
        MAX_LENGTH = 'maxLength'
        MIN_LENGTH = 'minLength'

        @property
        def keyword(self) -> str:
            return self.value

    def __init__(self, uri: Optional[str], location: JsonPointer, condition: 'StringValidator.ValidationType',
                 value: int):
        super().__init__(uri, location)
        self.condition = condition
        self.value = value

    def _valid_length(self, instance: str) -> bool:
        if self.condition is self.ValidationType.MAX_LENGTH:
            return len(instance) <= self.value
        return len(instance) >= self.value

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, str) or self._valid_length(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"String fails length check: {self.condition.keyword} {self.value}, was {len(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (self.condition, self.value)


class PatternValidator(Validator):
    """``pattern``: the regular expression must match somewhere in the string."""

    def __init__(self, uri: Optional[str], location: JsonPointer, pattern: str, regex: Pattern):
        super().__init__(uri, location)
        self.pattern = pattern
        self.regex = regex

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, str) or self.regex.search(instance) is not None

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"String doesn't match pattern {self.pattern} - {json_string(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (self.pattern,)


class FormatValidator(Validator):
    """``format`` as an assertion, using a checker function for the named format."""

    def __init__(self, uri: Optional[str], location: JsonPointer, name: str, checker: Callable[[Any], bool]):
        super().__init__(uri, location)
        self.name = name
        self.checker = checker

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, str) or self.checker(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Value fails format check \"{self.name}\", was {json_string(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (self.name,)


class ArrayValidator(Validator):
    """``minItems`` and ``maxItems``."""

    class ValidationType(Enum):
        MAX_ITEMS = 'maxItems'
        MIN_ITEMS = 'minItems'

        @property
        def keyword(self) -> str:
            return self.value

    def __init__(self, uri: Optional[str], location: JsonPointer, condition: 'ArrayValidator.ValidationType',
                 value: int):
        super().__init__(uri, location)
        self.condition = condition
        self.value = value

    def _valid_number_of_items(self, instance: list) -> bool:
        if self.condition is self.ValidationType.MAX_ITEMS:
            return len(instance) <= self.value
        return len(instance) >= self.value

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, list) or self._valid_number_of_items(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Array fails number of items check: {self.condition.keyword} {self.value}, was {len(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (self.condition, self.value)


class UniqueItemsValidator(Validator):
    """``uniqueItems: true``: no two elements may be structurally equal."""

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, list) or find_duplicates(instance) is None

    def explain(self, instance: Any) -> Optional[str]:
        if not isinstance(instance, list):
            return None
        duplicates = find_duplicates(instance)
        if duplicates is None:
            return None
        return f"Array items not unique: items {duplicates[0]} and {duplicates[1]} are equal"


class PropertiesValidator(Validator):
    """``minProperties`` and ``maxProperties``."""

    class ValidationType(Enum):
        MAX_PROPERTIES = 'maxProperties'
        MIN_PROPERTIES = 'minProperties'

        @property
        def keyword(self) -> str:
            return self.value

    def __init__(self, uri: Optional[str], location: JsonPointer, condition: 'PropertiesValidator.ValidationType',
                 value: int):
        super().__init__(uri, location)
        self.condition = condition
        self.value = value

    def _valid_number_of_properties(self, instance: dict) -> bool:
        if self.condition is self.ValidationType.MAX_PROPERTIES:
            return len(instance) <= self.value
        return len(instance) >= self.value

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, dict) or self._valid_number_of_properties(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Object fails number of properties check: {self.condition.keyword} {self.value}, was {len(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (self.condition, self.value)


class RequiredValidator(Validator):
    """``required``."""

    def __init__(self, uri: Optional[str], location: JsonPointer, properties: List[str]):
        super().__init__(uri, location)
        self.properties = properties

    def _missing(self, instance: dict) -> List[str]:
        return [name for name in self.properties if name not in instance]

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, dict) or not self._missing(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if not isinstance(instance, dict):
            return None
        missing = self._missing(instance)
        if not missing:
            return None
        if len(missing) == 1:
            return f"Required property \"{missing[0]}\" not found"
        return "Required properties " + ", ".join(f"\"{name}\"" for name in missing) + " not found"

    def _key(self) -> tuple:
        return super()._key() + (tuple(self.properties),)


class DependentRequiredValidator(Validator):
    """``dependentRequired`` (and the array form of draft-07 ``dependencies``)."""

    def __init__(self, uri: Optional[str], location: JsonPointer, dependencies: Dict[str, List[str]]):
        super().__init__(uri, location)
        self.dependencies = dependencies

    def _missing(self, instance: dict) -> List[str]:
        messages = []
        for name, required in self.dependencies.items():
            if name in instance:
                for dependency in required:
                    if dependency not in instance:
                        messages.append(f"Property \"{name}\" requires property \"{dependency}\"")
        return messages

    def test(self, instance: Any) -> bool:
        return not isinstance(instance, dict) or not self._missing(instance)

    def explain(self, instance: Any) -> Optional[str]:
        if not isinstance(instance, dict):
            return None
        missing = self._missing(instance)
        return "; ".join(missing) if missing else None

    def _key(self) -> tuple:
        return super()._key() + (canonical_json(self.dependencies),)


class EnumValidator(Validator):
    """``enum``."""

    def __init__(self, uri: Optional[str], location: JsonPointer, values: List[Any]):
        super().__init__(uri, location)
        self.values = values

    def test(self, instance: Any) -> bool:
        return any(json_equals(instance, value) for value in self.values)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Not in enumerated values: {json_string(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (canonical_json(self.values),)


class ConstValidator(Validator):
    """``const``."""

    def __init__(self, uri: Optional[str], location: JsonPointer, value: Any):
        super().__init__(uri, location)
        self.value = value

    def test(self, instance: Any) -> bool:
        return json_equals(instance, self.value)

    def explain(self, instance: Any) -> Optional[str]:
        if self.test(instance):
            return None
        return f"Does not match constant: {json_string(instance)}"

    def _key(self) -> tuple:
        return super()._key() + (canonical_json(self.value),)

