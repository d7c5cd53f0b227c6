"""Validates schema documents against a meta-schema served by a custom loader."""

import json
import os
import sys
import unittest
from pathlib import Path

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsonschemata.parser import Parser

META_SCHEMA_PREFIX = "https://example.com/meta/"
META_SCHEMA_URI = "https://example.com/meta/schema"
SCHEMAS_DIR = Path(project_root) / "test" / "schemas"


def meta_schema_loader(uri):
    if not uri.startswith(META_SCHEMA_PREFIX):
        raise FileNotFoundError(uri)
    local_name = uri[len(META_SCHEMA_PREFIX):]
    return (SCHEMAS_DIR / "metaschema" / f"{local_name}.json").read_text(encoding="utf-8")


class TestMetaSchema(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.parser = Parser(meta_schema_loader)
        cls.meta_schema = cls.parser.parse_uri(META_SCHEMA_URI)

    def load(self, name):
        return json.loads((SCHEMAS_DIR / name).read_text(encoding="utf-8"))

    def test_documents_loaded_through_loader(self):
        for name in ("schema", "applicator", "validation"):
            self.assertIn(f"{META_SCHEMA_PREFIX}{name}#", self.parser.schema_cache)

    def test_valid_schemas(self):
        self.assertTrue(self.meta_schema.validate(self.load("person.schema.json")))
        self.assertTrue(self.meta_schema.validate(self.load("test-custom-validator.schema.json")))
        self.assertTrue(self.meta_schema.validate({}))

    def test_meta_schema_documents_are_valid(self):
        for name in ("schema", "applicator", "validation"):
            self.assertTrue(self.meta_schema.validate(self.load(f"metaschema/{name}.json")))

    def test_boolean_schemas(self):
        self.assertTrue(self.meta_schema.validate(True))
        self.assertTrue(self.meta_schema.validate(False))

    def test_invalid_schemas(self):
        self.assertFalse(self.meta_schema.validate({"type": "foo"}))
        self.assertFalse(self.meta_schema.validate({"minLength": -1}))
        self.assertFalse(self.meta_schema.validate({"properties": 5}))
        self.assertFalse(self.meta_schema.validate({"pattern": "("}))
        self.assertFalse(self.meta_schema.validate({"allOf": []}))
        self.assertFalse(self.meta_schema.validate({"properties": {"a": {"required": ["x", "x"]}}}))
        self.assertFalse(self.meta_schema.validate(5))

    def test_error_report_points_into_meta_schema(self):
        output = self.meta_schema.validate_basic({"minLength": -1})
        leaf = output.errors[-1]
        self.assertEqual(leaf.instance_location, "#/minLength")
        self.assertEqual(leaf.keyword_location, "#/allOf/1/$ref/properties/minLength/$ref/minimum")
        self.assertEqual(leaf.absolute_keyword_location,
                         "https://example.com/meta/validation#/$defs/nonNegativeInteger/minimum")


if __name__ == '__main__':
    unittest.main()
