"""Tests for the leaf validators and format checkers."""

import os
import re
import sys
import unittest
from decimal import Decimal

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonpointer import JsonPointer

from jsonschemata import formats
from jsonschemata.common import ROOT_POINTER, json_equals
from jsonschemata.validation import (ArrayValidator, ConstValidator, DependentRequiredValidator, EnumValidator,
                                     NumberValidator, PatternValidator, PropertiesValidator, RequiredValidator,
                                     StringValidator, TypeValidator, UniqueItemsValidator)

MAX_ITEMS = ArrayValidator.ValidationType.MAX_ITEMS
MIN_ITEMS = ArrayValidator.ValidationType.MIN_ITEMS


class TestArrayValidator(unittest.TestCase):
    """minItems / maxItems."""

    def test_max_items(self):
        for n in range(0, 5):
            validator = ArrayValidator(None, JsonPointer('/maxItems'), MAX_ITEMS, n)
            for length in range(0, 6):
                self.assertEqual(validator.validate([0] * length), length <= n)

    def test_min_items(self):
        for n in range(0, 5):
            validator = ArrayValidator(None, JsonPointer('/minItems'), MIN_ITEMS, n)
            for length in range(0, 6):
                self.assertEqual(validator.validate([0] * length), length >= n)

    def test_non_arrays_pass(self):
        for n in (0, 1, 10):
            for condition in (MAX_ITEMS, MIN_ITEMS):
                validator = ArrayValidator(None, JsonPointer('/x'), condition, n)
                for instance in (None, True, 1, 1.5, "abc", {"a": 1}):
                    self.assertTrue(validator.validate(instance))
                    self.assertIsNone(validator.get_error_entry(JsonPointer('/x'), instance, ROOT_POINTER))

    def test_error_entry(self):
        validator = ArrayValidator("http://example.com/s", JsonPointer('/maxItems'), MAX_ITEMS, 2)
        entry = validator.get_error_entry(JsonPointer('/maxItems'), [1, 2, 3], ROOT_POINTER)
        self.assertEqual(entry.keyword_location, "#/maxItems")
        self.assertEqual(entry.absolute_keyword_location, "http://example.com/s#/maxItems")
        self.assertEqual(entry.instance_location, "#")
        self.assertEqual(entry.error, "Array fails number of items check: maxItems 2, was 3")

    def test_nested_instance_location(self):
        validator = ArrayValidator(None, JsonPointer('/minItems'), MIN_ITEMS, 1)
        document = {"a": {"b": []}}
        self.assertFalse(validator.validate(document, JsonPointer('/a/b')))
        entry = validator.get_error_entry(JsonPointer('/properties/a/minItems'), document, JsonPointer('/a/b'))
        self.assertEqual(entry.instance_location, "#/a/b")
        self.assertIsNone(entry.absolute_keyword_location)

    def test_structural_equality(self):
        v1 = ArrayValidator(None, JsonPointer('/maxItems'), MAX_ITEMS, 2)
        v2 = ArrayValidator(None, JsonPointer('/maxItems'), MAX_ITEMS, 2)
        self.assertEqual(v1, v2)
        self.assertEqual(hash(v1), hash(v2))
        self.assertNotEqual(v1, ArrayValidator(None, JsonPointer('/maxItems'), MAX_ITEMS, 3))
        self.assertNotEqual(v1, ArrayValidator(None, JsonPointer('/maxItems'), MIN_ITEMS, 2))
        self.assertNotEqual(v1, ArrayValidator(None, JsonPointer('/items/maxItems'), MAX_ITEMS, 2))


class TestTypeValidator(unittest.TestCase):

    def test_types(self):
        self.assertTrue(TypeValidator(None, JsonPointer('/type'), ['integer']).validate(1))
        self.assertTrue(TypeValidator(None, JsonPointer('/type'), ['integer']).validate(1.0))
        self.assertFalse(TypeValidator(None, JsonPointer('/type'), ['integer']).validate(1.5))
        self.assertTrue(TypeValidator(None, JsonPointer('/type'), ['number']).validate(1))
        self.assertFalse(TypeValidator(None, JsonPointer('/type'), ['number']).validate(True))
        self.assertTrue(TypeValidator(None, JsonPointer('/type'), ['boolean']).validate(False))
        self.assertTrue(TypeValidator(None, JsonPointer('/type'), ['null']).validate(None))
        self.assertTrue(TypeValidator(None, JsonPointer('/type'), ['string', 'null']).validate(None))
        self.assertFalse(TypeValidator(None, JsonPointer('/type'), ['object']).validate([]))

    def test_message(self):
        validator = TypeValidator(None, JsonPointer('/type'), ['string', 'null'])
        self.assertEqual(validator.explain(3), "Incorrect type, expected string or null, was integer")


class TestNumberValidator(unittest.TestCase):
    T = NumberValidator.ValidationType

    def test_bounds(self):
        self.assertTrue(NumberValidator(None, JsonPointer('/minimum'), self.T.MINIMUM, 5).validate(5))
        self.assertFalse(NumberValidator(None, JsonPointer('/exclusiveMinimum'), self.T.EXCLUSIVE_MINIMUM, 5).validate(5))
        self.assertTrue(NumberValidator(None, JsonPointer('/maximum'), self.T.MAXIMUM, 5).validate(4.9))
        self.assertFalse(NumberValidator(None, JsonPointer('/exclusiveMaximum'), self.T.EXCLUSIVE_MAXIMUM, 5).validate(5))

    def test_multiple_of_is_exact(self):
        validator = NumberValidator(None, JsonPointer('/multipleOf'), self.T.MULTIPLE_OF, 0.1)
        self.assertTrue(validator.validate(0.3))
        self.assertTrue(validator.validate(Decimal('12.7')))
        self.assertFalse(validator.validate(0.35))

    def test_non_numbers_pass(self):
        validator = NumberValidator(None, JsonPointer('/minimum'), self.T.MINIMUM, 5)
        for instance in ("1", True, None, [], {}):
            self.assertTrue(validator.validate(instance))

    def test_message(self):
        validator = NumberValidator(None, JsonPointer('/minimum'), self.T.MINIMUM, 5)
        self.assertEqual(validator.explain(3), "Number fails check: minimum 5, was 3")


class TestStringValidators(unittest.TestCase):

    def test_length_counts_code_points(self):
        validator = StringValidator(None, JsonPointer('/maxLength'), StringValidator.ValidationType.MAX_LENGTH, 2)
        self.assertTrue(validator.validate("\U0001F600\U0001F600"))
        self.assertFalse(validator.validate("abc"))
        self.assertEqual(validator.explain("abc"), "String fails length check: maxLength 2, was 3")

    def test_pattern_searches_anywhere(self):
        validator = PatternValidator(None, JsonPointer('/pattern'), 'b+', re.compile('b+'))
        self.assertTrue(validator.validate("abbbc"))
        self.assertFalse(validator.validate("ac"))
        self.assertTrue(validator.validate(12))
        self.assertEqual(validator.explain("ac"), 'String doesn\'t match pattern b+ - "ac"')


class TestObjectValidators(unittest.TestCase):

    def test_required(self):
        validator = RequiredValidator(None, JsonPointer('/required'), ['a', 'b'])
        self.assertTrue(validator.validate({'a': 1, 'b': None}))
        self.assertEqual(validator.explain({'a': 1}), 'Required property "b" not found')
        self.assertEqual(validator.explain({}), 'Required properties "a", "b" not found')
        self.assertTrue(validator.validate([]))

    def test_dependent_required(self):
        validator = DependentRequiredValidator(None, JsonPointer('/dependentRequired'), {'card': ['billing']})
        self.assertTrue(validator.validate({}))
        self.assertTrue(validator.validate({'card': 1, 'billing': 2}))
        self.assertEqual(validator.explain({'card': 1}), 'Property "card" requires property "billing"')

    def test_number_of_properties(self):
        validator = PropertiesValidator(None, JsonPointer('/maxProperties'),
                                        PropertiesValidator.ValidationType.MAX_PROPERTIES, 1)
        self.assertTrue(validator.validate({'a': 1}))
        self.assertFalse(validator.validate({'a': 1, 'b': 2}))
        self.assertTrue(validator.validate("not an object"))


class TestEqualityValidators(unittest.TestCase):

    def test_unique_items(self):
        validator = UniqueItemsValidator(None, JsonPointer('/uniqueItems'))
        self.assertTrue(validator.validate([1, True, "1"]))
        self.assertFalse(validator.validate([1, 1.0]))
        self.assertFalse(validator.validate([{"a": [1]}, {"a": [1]}]))
        self.assertEqual(validator.explain([0, 1, 0]), "Array items not unique: items 0 and 2 are equal")

    def test_enum_and_const(self):
        self.assertTrue(EnumValidator(None, JsonPointer('/enum'), [1, "a", None]).validate(1.0))
        self.assertFalse(EnumValidator(None, JsonPointer('/enum'), [1, "a", None]).validate(True))
        self.assertEqual(EnumValidator(None, JsonPointer('/enum'), ["a"]).explain("b"),
                         'Not in enumerated values: "b"')
        self.assertTrue(ConstValidator(None, JsonPointer('/const'), {"a": [1, 2]}).validate({"a": [1, 2.0]}))
        self.assertFalse(ConstValidator(None, JsonPointer('/const'), False).validate(0))

    def test_json_equals(self):
        self.assertTrue(json_equals({"a": 1, "b": [None]}, {"b": [None], "a": 1.0}))
        self.assertFalse(json_equals([1], [1, 1]))
        self.assertFalse(json_equals(True, 1))


class TestFormats(unittest.TestCase):

    def test_date_and_time(self):
        self.assertTrue(formats.check_date("2020-02-29"))
        self.assertFalse(formats.check_date("2021-02-29"))
        self.assertFalse(formats.check_date("2021-2-1"))
        self.assertTrue(formats.check_time("12:30:00Z"))
        self.assertTrue(formats.check_time("12:30:00.123+05:30"))
        self.assertFalse(formats.check_time("12:30:00"))
        self.assertTrue(formats.check_time("23:59:60Z"))
        self.assertFalse(formats.check_time("12:00:60Z"))
        self.assertTrue(formats.check_time("00:59:60+01:00"))
        self.assertTrue(formats.check_date_time("2020-01-01T00:00:00Z"))
        self.assertFalse(formats.check_date_time("2020-01-01 00:00:00Z"))
        self.assertFalse(formats.check_date("2020-01-01\n"))
        self.assertFalse(formats.check_time("12:00:00Z\n"))
        self.assertFalse(formats.check_date_time("2020-01-01T00:00:00Z\n"))
        self.assertFalse(formats.check_duration("P1D\n"))

    def test_duration(self):
        self.assertTrue(formats.check_duration("P1W"))
        self.assertTrue(formats.check_duration("P1Y2M3DT4H5M6S"))
        self.assertTrue(formats.check_duration("PT1H"))
        self.assertFalse(formats.check_duration("P"))
        self.assertFalse(formats.check_duration("PT"))
        self.assertFalse(formats.check_duration("P1Y2W"))

    def test_network_formats(self):
        self.assertTrue(formats.check_ipv4("192.168.0.1"))
        self.assertFalse(formats.check_ipv4("01.1.1.1"))
        self.assertFalse(formats.check_ipv4("256.1.1.1"))
        self.assertTrue(formats.check_ipv6("::1"))
        self.assertFalse(formats.check_ipv6("fe80::1%eth0"))
        self.assertTrue(formats.check_hostname("example.com"))
        self.assertFalse(formats.check_hostname("-bad.example.com"))
        self.assertTrue(formats.check_idn_hostname("münchen.de"))
        self.assertTrue(formats.check_email("joe@example.com"))
        self.assertFalse(formats.check_email("joe"))
        self.assertTrue(formats.check_email("joe@[127.0.0.1]"))
        self.assertFalse(formats.check_ipv4("1.2.3.4\n"))
        self.assertFalse(formats.check_ipv6("::1\n"))
        self.assertFalse(formats.check_hostname("example.com\n"))
        self.assertFalse(formats.check_email("joe\n@example.com"))

    def test_uri_formats(self):
        self.assertTrue(formats.check_uri("http://example.com/a?b=c#d"))
        self.assertFalse(formats.check_uri("/relative"))
        self.assertTrue(formats.check_uri_reference("/relative"))
        self.assertFalse(formats.check_uri_reference("http://x y"))
        self.assertTrue(formats.check_iri("http://é.example/"))
        self.assertFalse(formats.check_uri("http://é.example/"))
        self.assertTrue(formats.check_uri_template("http://example.com/{id}"))
        self.assertFalse(formats.check_uri_template("http://example.com/{id"))

    def test_pointer_and_misc_formats(self):
        self.assertTrue(formats.check_json_pointer("/a~1b/0"))
        self.assertTrue(formats.check_json_pointer(""))
        self.assertFalse(formats.check_json_pointer("a"))
        self.assertFalse(formats.check_json_pointer("/a~2"))
        self.assertTrue(formats.check_relative_json_pointer("1/a"))
        self.assertTrue(formats.check_relative_json_pointer("0#"))
        self.assertFalse(formats.check_relative_json_pointer("01"))
        self.assertTrue(formats.check_uuid("123e4567-e89b-12d3-a456-426614174000"))
        self.assertFalse(formats.check_uuid("123e4567e89b12d3a456426614174000"))
        self.assertTrue(formats.check_regex("[a-z]+"))
        self.assertFalse(formats.check_regex("("))
        self.assertFalse(formats.check_uuid("123e4567-e89b-12d3-a456-426614174000\n"))
        self.assertFalse(formats.check_relative_json_pointer("1\n"))
        self.assertFalse(formats.check_uri_template("http://example.com/{id}\n"))

    def test_all_formats_registered(self):
        self.assertEqual(set(formats.FORMAT_CHECKERS), {
            'date', 'time', 'date-time', 'duration', 'email', 'idn-email', 'hostname', 'idn-hostname',
            'ipv4', 'ipv6', 'uri', 'uri-reference', 'iri', 'iri-reference', 'uri-template', 'uuid',
            'json-pointer', 'relative-json-pointer', 'regex'})


if __name__ == '__main__':
    unittest.main()
