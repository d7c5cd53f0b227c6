import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonschemata.parser import Parser
from jsonschemata.schema import SUB_SCHEMA_ERROR_MESSAGE
from jsonschemata.validation import StringValidator


def custom_validation_handler(key, uri, location, value):
    if key == "x-test":
        if value == "not-empty":
            return StringValidator(uri, location, StringValidator.ValidationType.MIN_LENGTH, 1)
        raise ValueError("Unknown type")
    return None


class TestCustomValidator(unittest.TestCase):

    def setUp(self):
        self.schema_file = os.path.join(project_root, "test", "schemas", "test-custom-validator.schema.json")

    def test_custom_validator(self):
        parser = Parser()
        parser.custom_validation_handler = custom_validation_handler
        schema = parser.parse_file(self.schema_file)

        json1 = {"aaa": "Q"}
        self.assertTrue(schema.validate(json1))
        self.assertTrue(schema.validate_basic(json1).valid)

        json2 = {"aaa": ""}
        self.assertFalse(schema.validate(json2))
        result = schema.validate_basic(json2)
        self.assertFalse(result.valid)
        errors = result.errors
        self.assertEqual(len(errors), 3)

        self.assertEqual(errors[0].keyword_location, "#")
        self.assertEqual(errors[0].absolute_keyword_location, "http://pwall.net/test-custom#")
        self.assertEqual(errors[0].instance_location, "#")
        self.assertEqual(errors[0].error, SUB_SCHEMA_ERROR_MESSAGE)

        self.assertEqual(errors[1].keyword_location, "#/properties/aaa")
        self.assertEqual(errors[1].absolute_keyword_location, "http://pwall.net/test-custom#/properties/aaa")
        self.assertEqual(errors[1].instance_location, "#/aaa")
        self.assertEqual(errors[1].error, SUB_SCHEMA_ERROR_MESSAGE)

        self.assertEqual(errors[2].keyword_location, "#/properties/aaa/x-test")
        self.assertEqual(errors[2].absolute_keyword_location, "http://pwall.net/test-custom#/properties/aaa/x-test")
        self.assertEqual(errors[2].instance_location, "#/aaa")
        self.assertEqual(errors[2].error, "String fails length check: minLength 1, was 0")

    def test_unknown_keyword_without_handler_is_annotation(self):
        schema = Parser().parse_file(self.schema_file)
        self.assertTrue(schema.validate({"aaa": ""}))

    def test_handler_returning_none_is_annotation(self):
        parser = Parser()
        parser.custom_validation_handler = lambda key, uri, location, value: None
        schema = parser.parse({"x-anything": 42, "type": "string"})
        self.assertTrue(schema.validate("abc"))
        self.assertFalse(schema.validate(1))

    def test_handler_sees_keyword_context(self):
        seen = []

        def handler(key, uri, location, value):
            seen.append((key, uri, location.path, value))
            return None

        parser = Parser()
        parser.custom_validation_handler = handler
        parser.parse({"properties": {"a": {"x-one": 1}}, "x-two": [2]}, "http://example.com/s.json")
        self.assertEqual(seen, [
            ("x-one", "http://example.com/s.json", "/properties/a/x-one", 1),
            ("x-two", "http://example.com/s.json", "/x-two", [2]),
        ])

    def test_handler_error_propagates(self):
        parser = Parser()
        parser.custom_validation_handler = custom_validation_handler
        with self.assertRaises(ValueError):
            parser.parse({"x-test": "something-else"})


if __name__ == '__main__':
    unittest.main()
