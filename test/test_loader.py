"""Tests for the default schema loader."""

import io
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

import requests

from jsonschemata.loader import DefaultSchemaLoader, parse_schema_text
from jsonschemata.parser import Parser
from jsonschemata.schema import SchemaError


class TestDefaultSchemaLoader(unittest.TestCase):

    def test_file_uri(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "a schema.json"
            path.write_text('{"type": "string"}', encoding="utf-8")
            loader = DefaultSchemaLoader()
            uri = path.resolve().as_uri()
            self.assertEqual(loader(uri), '{"type": "string"}')
            self.assertIn(uri, loader.content_cache)

    @patch("jsonschemata.loader.requests.get")
    def test_http_uri(self, mock_get):
        response = MagicMock()
        response.text = '{"type": "integer"}'
        mock_get.return_value = response
        loader = DefaultSchemaLoader()
        self.assertEqual(loader("https://example.com/s.json"), '{"type": "integer"}')
        self.assertEqual(loader("https://example.com/s.json"), '{"type": "integer"}')
        mock_get.assert_called_once_with("https://example.com/s.json", timeout=30)
        response.raise_for_status.assert_called_once()

    @patch("jsonschemata.loader.requests.get")
    def test_http_error_fails_compilation(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("404 Client Error")
        mock_get.return_value = response
        with self.assertRaises(SchemaError) as context:
            Parser().parse({"$ref": "https://example.com/missing.json"})
        self.assertIsInstance(context.exception.__cause__, requests.HTTPError)

    @patch("jsonschemata.loader.requests.get")
    def test_parser_uses_default_loader(self, mock_get):
        response = MagicMock()
        response.text = '{"$defs": {"n": {"type": "number"}}}'
        mock_get.return_value = response
        schema = Parser().parse({"items": {"$ref": "https://example.com/defs.json#/$defs/n"}})
        self.assertTrue(schema.validate([1, 2.5]))
        self.assertFalse(schema.validate(["x"]))

    def test_unsupported_scheme(self):
        with self.assertRaises(NotImplementedError):
            DefaultSchemaLoader()("ftp://example.com/s.json")


class TestParseSchemaText(unittest.TestCase):

    def test_json(self):
        self.assertEqual(parse_schema_text('{"type": "string"}', "http://example.com/s.json"), {"type": "string"})

    def test_yaml(self):
        self.assertEqual(parse_schema_text("type: string\nminLength: 1\n", "file:///tmp/s.yaml"),
                         {"type": "string", "minLength": 1})
        self.assertEqual(parse_schema_text("type: string\n", "http://example.com/s.yml"), {"type": "string"})

    def test_bytes_and_streams(self):
        self.assertEqual(parse_schema_text(b'{"a": 1}'), {"a": 1})
        self.assertEqual(parse_schema_text(io.StringIO('{"a": 1}')), {"a": 1})
        self.assertEqual(parse_schema_text(io.BytesIO(b'true')), True)

    def test_parsed_document_passes_through(self):
        document = {"type": "null"}
        self.assertIs(parse_schema_text(document), document)


if __name__ == '__main__':
    unittest.main()
