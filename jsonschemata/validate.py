"""Validates JSON instance files against a JSON Schema.

This module provides the file-level interface used by the
``jsonschemata-validate`` command: instance files may hold a single JSON
document, a JSON array of instances, or JSON Lines.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional, Tuple

from jsonschemata.output import OUTPUT_FORMATS, render_output
from jsonschemata.parser import Parser
from jsonschemata.schema import SUB_SCHEMA_ERROR_MESSAGE, JSONSchema, SchemaError


class ValidationResult:
    """Result of validating a JSON instance against a schema."""

    def __init__(self, is_valid: bool, errors: Optional[List[str]] = None, instance_path: Optional[str] = None,
                 output: Optional[dict] = None):
        self.is_valid = is_valid
        self.errors = errors or []
        self.instance_path = instance_path
        self.output = output

    def __str__(self) -> str:
        if self.is_valid:
            return "✓ Valid" + (f": {self.instance_path}" if self.instance_path else "")
        prefix = f"{self.instance_path}: " if self.instance_path else ""
        return f"✗ Invalid: {prefix}" + "; ".join(self.errors)

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors})"


def validate_instance(instance: Any, schema: JSONSchema, output_format: str = 'basic') -> ValidationResult:
    """Validates a JSON instance against a compiled schema.

    Args:
        instance: The JSON value to validate
        schema: The compiled schema
        output_format: 'flag', 'basic' or 'detailed'; selects the shape kept in ``output``

    Returns:
        ValidationResult with validation status and any errors
    """
    basic = schema.validate_basic(instance)
    errors = [str(e) for e in basic.errors or [] if e.error != SUB_SCHEMA_ERROR_MESSAGE]
    output = render_output(schema, instance, output_format) if output_format != 'basic' else basic.to_dict()
    return ValidationResult(is_valid=basic.valid, errors=errors, output=output)


def load_instances(instance_file: str, schema_is_array: bool = False) -> List[Tuple[Any, str]]:
    """Loads the instances held in a file, each with a label naming its position.

    Args:
        instance_file: Path to JSON file (single document, array, or JSONL)
        schema_is_array: When True, a JSON array is one instance rather than a list of instances

    Returns:
        List of (instance, label) pairs
    """
    with open(instance_file, 'r', encoding='utf-8') as f:
        content = f.read().strip()

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        instances = []
        for i, line in enumerate(content.split('\n')):
            line = line.strip()
            if line:
                try:
                    instances.append((json.loads(line), f"{instance_file}:{i + 1}"))
                except json.JSONDecodeError as e:
                    raise ValueError(f"{instance_file}:{i + 1}: invalid JSON: {e.msg}") from e
        return instances

    if isinstance(data, list) and not schema_is_array:
        return [(item, f"{instance_file}[{i}]") for i, item in enumerate(data)]
    return [(data, instance_file)]


def _expects_array(schema: JSONSchema, parser: Parser) -> bool:
    document = parser.document_cache.get(schema.uri or '')
    return isinstance(document, dict) and document.get('type') == 'array'


def validate_file(instance_file: str, schema_file: str, output_format: str = 'basic',
                  parser: Optional[Parser] = None) -> List[ValidationResult]:
    """Validates JSON instance file(s) against a schema file.

    Args:
        instance_file: Path to JSON file (single object, array, or JSONL)
        schema_file: Path to the schema file (JSON or YAML)
        output_format: The output shape kept on each result
        parser: The parser to compile the schema with; a new one by default

    Returns:
        List of ValidationResult for each instance in the file
    """
    parser = parser or Parser()
    schema = parser.parse_file(schema_file)
    return _validate_loaded(instance_file, schema, _expects_array(schema, parser), output_format)


def _validate_loaded(instance_file: str, schema: JSONSchema, schema_is_array: bool,
                     output_format: str) -> List[ValidationResult]:
    results = []
    for instance, path in load_instances(instance_file, schema_is_array):
        result = validate_instance(instance, schema, output_format)
        result.instance_path = path
        results.append(result)
    return results


def validate_json_instances(input_files: List[str], schema_file: str, output_format: str = 'basic',
                            verbose: bool = False) -> Tuple[int, int]:
    """Validates multiple JSON instance files against a schema.

    Args:
        input_files: List of JSON file paths to validate
        schema_file: Path to schema file
        output_format: 'flag', 'basic' or 'detailed'; with anything but 'basic' the
            full output document is printed for each instance
        verbose: Whether to print validation results

    Returns:
        Tuple of (valid_count, invalid_count)
    """
    valid_count = 0
    invalid_count = 0
    parser = Parser()
    schema = parser.parse_file(schema_file)
    schema_is_array = _expects_array(schema, parser)

    for input_file in input_files:
        for result in _validate_loaded(input_file, schema, schema_is_array, output_format):
            if result.is_valid:
                valid_count += 1
            else:
                invalid_count += 1
            if verbose:
                print(result)
                if output_format != 'basic':
                    print(json.dumps(result.output, indent=2, ensure_ascii=False))

    return valid_count, invalid_count


def validate(input: List[str], schema: str, output_format: str = 'basic',  # pylint: disable=redefined-builtin
             quiet: bool = False) -> None:
    """Validates JSON instances against a JSON Schema and exits with status 1 if any is invalid.

    Args:
        input: List of JSON files to validate
        schema: Path to the schema file
        output_format: Output shape printed for each instance
        quiet: Suppress output, exit with code 0 if valid, 1 if invalid
    """
    valid_count, invalid_count = validate_json_instances(
        input_files=input,
        schema_file=schema,
        output_format=output_format,
        verbose=not quiet
    )

    if not quiet:
        total = valid_count + invalid_count
        print(f"\nValidation summary: {valid_count}/{total} instances valid")

    if invalid_count > 0:
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Console entry point of ``jsonschemata-validate``."""
    parser = argparse.ArgumentParser(description='Validate JSON instances against a JSON Schema')
    parser.add_argument('input', nargs='+', help='JSON, JSON array or JSON Lines files to validate')
    parser.add_argument('--schema', required=True, help='Path to the JSON Schema (JSON or YAML)')
    parser.add_argument('--output-format', choices=OUTPUT_FORMATS, default='basic',
                        help='Output format printed for each instance')
    parser.add_argument('--quiet', action='store_true', help='Suppress output, only set the exit code')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        validate(args.input, args.schema, args.output_format, args.quiet)
    except (SchemaError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == '__main__':
    main()
