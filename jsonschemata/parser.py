"""
Compiles JSON Schema documents into trees of validator nodes.

The parser keeps a registry (``schema_cache``) of every compiled schema,
keyed ``"<uri>#<json-pointer>"`` or ``"<uri>#<anchor>"``. References are
compiled to ``RefSchema`` nodes that hold only the key of their target.
After a document is compiled, every pending reference is resolved: missing
documents are fetched through the loader hook, pointers into parts of a
document that were not compiled as schemas are compiled on demand, and
reference chains that would recurse without consuming any of the instance
are rejected.
"""

import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from jsonpointer import JsonPointer, JsonPointerException

from jsonschemata.applicators import (AdditionalPropertiesSchema, ContainsSchema, DependentSchemasSchema,
                                      ItemsSchema, PatternPropertiesSchema, PrefixItemsSchema, PropertiesSchema,
                                      PropertyNamesSchema)
from jsonschemata.common import (JSON_TYPES, ROOT_POINTER, child_pointer, ecma_regex, is_integer, is_number,
                                 pointer_to_fragment, registry_key, resolve_uri, split_uri, strip_fragment)
from jsonschemata.formats import FORMAT_CHECKERS
from jsonschemata.loader import DefaultSchemaLoader, parse_schema_text
from jsonschemata.schema import (CombinationSchema, FalseSchema, IfThenElseSchema, JSONSchema, NotSchema,
                                 RefSchema, SchemaError, SubSchema, TrueSchema)
from jsonschemata.validation import (ArrayValidator, ConstValidator, DependentRequiredValidator, EnumValidator,
                                     FormatValidator, NumberValidator, PatternValidator, PropertiesValidator,
                                     RequiredValidator, StringValidator, TypeValidator, UniqueItemsValidator)

logger = logging.getLogger(__name__)

DRAFT_2020_12 = 'https://json-schema.org/draft/2020-12/schema'
DRAFT_2019_09 = 'https://json-schema.org/draft/2019-09/schema'
DRAFT_07 = 'http://json-schema.org/draft-07/schema#'
DRAFT_04 = 'http://json-schema.org/draft-04/schema#'

ANNOTATION_KEYWORDS = {
    'title', 'description', 'default', 'examples', 'deprecated', 'readOnly', 'writeOnly', '$comment',
    '$vocabulary', 'contentEncoding', 'contentMediaType', 'contentSchema', 'minContains', 'maxContains',
    'then', 'else', '$recursiveAnchor', 'unevaluatedProperties', 'unevaluatedItems',
}

# keywords handled before the keyword loop
IDENTITY_KEYWORDS = {'$schema', '$id', '$anchor', '$dynamicAnchor', '$defs', 'definitions'}

REFERENCE_KEYWORDS = ('$ref', '$dynamicRef', '$recursiveRef')

NUMBER_KEYWORDS = {t.keyword: t for t in NumberValidator.ValidationType}
STRING_KEYWORDS = {t.keyword: t for t in StringValidator.ValidationType}
ARRAY_KEYWORDS = {t.keyword: t for t in ArrayValidator.ValidationType}
PROPERTIES_KEYWORDS = {t.keyword: t for t in PropertiesValidator.ValidationType}
COMBINATION_KEYWORDS = {t.keyword: t for t in CombinationSchema.CombinationType}

# draft-04 bounds, made exclusive by a boolean sibling
DRAFT_04_BOUNDS = {'maximum': 'exclusiveMaximum', 'minimum': 'exclusiveMinimum'}

CustomValidationHandler = Callable[[str, Optional[str], JsonPointer, Any], Optional[JSONSchema]]


def draft_of(schema_uri: Optional[str], default: str) -> str:
    """Map a ``$schema`` value to one of the supported dialects."""
    if not schema_uri:
        return default
    if '2019-09' in schema_uri:
        return DRAFT_2019_09
    if re.search(r'draft-0[67]', schema_uri):
        return DRAFT_07
    if re.search(r'draft-0[0-4]', schema_uri):
        return DRAFT_04
    return DRAFT_2020_12


class Parser:
    """
    Compiles schema documents and caches them by URI.

    Configuration is by attribute, set before the first ``parse``:

    - ``uri_resolver``: called with a URI, returns the document text (or bytes,
      a readable file object, or the parsed document);
    - ``custom_validation_handler``: called as ``(keyword, uri, location, value)``
      for every keyword the parser does not recognise; a returned node is
      added to the schema, None makes the keyword an annotation;
    - ``nonstandard_format_handler``: called with a format name that has no
      built-in checker, returns a checker function or None;
    - ``validate_formats``: when False, ``format`` is an annotation.

    A parser must not be shared between threads while it is compiling.
    """

    def __init__(self, uri_resolver: Optional[Callable[[str], Any]] = None):
        self.uri_resolver = uri_resolver if uri_resolver is not None else DefaultSchemaLoader()
        self.custom_validation_handler: Optional[CustomValidationHandler] = None
        self.nonstandard_format_handler: Optional[Callable[[str], Optional[Callable[[str], bool]]]] = None
        self.validate_formats = True
        self.schema_cache: Dict[str, JSONSchema] = {}
        self.document_cache: Dict[str, Any] = {}
        self._drafts: Dict[str, str] = {}
        self._pending_refs: List[Tuple[RefSchema, str, str]] = []
        self._new_refs: List[RefSchema] = []

    def parse(self, schema: Any, uri: Optional[str] = None) -> JSONSchema:
        """
        Compile a schema document.

        Args:
            schema: The parsed schema document (a dict or a boolean).
            uri (str | None): The URI of the document; None for an anonymous schema.

        Returns:
            JSONSchema: The root node of the compiled schema.

        Raises:
            SchemaError: If the document, or a document it references, is not a valid schema.
        """
        base_uri = strip_fragment(uri)
        if base_uri is None:
            self._reset_anonymous()
        saved = self._snapshot()
        try:
            result = self._parse_document(schema, base_uri)
            self._resolve_pending()
            self._check_reference_loops()
        except Exception:
            self._restore(saved)
            raise
        finally:
            self._pending_refs = []
            self._new_refs = []
        return result

    def parse_file(self, path: str) -> JSONSchema:
        """Compile a schema from a JSON or YAML file; its file URI becomes the base URI."""
        uri = Path(path).resolve().as_uri()
        with open(path, 'r', encoding='utf-8') as file:
            document = parse_schema_text(file.read(), uri)
        return self.parse(document, uri)

    def parse_uri(self, uri: str) -> JSONSchema:
        """
        Return the compiled schema for a URI, loading and compiling the document on first use.

        The URI may carry a JSON Pointer or anchor fragment.
        """
        document_uri, fragment = split_uri(uri)
        saved = self._snapshot()
        try:
            key = self._target_key(document_uri, fragment, document_uri)
            if key not in self.schema_cache:
                self._resolve_key(key, document_uri, fragment, uri)
                self._resolve_pending()
                self._check_reference_loops()
        except Exception:
            self._restore(saved)
            raise
        finally:
            self._pending_refs = []
            self._new_refs = []
        return self.schema_cache[key]

    def _snapshot(self) -> Tuple[Dict[str, JSONSchema], Dict[str, Any], Dict[str, str]]:
        return dict(self.schema_cache), dict(self.document_cache), dict(self._drafts)

    def _restore(self, saved: Tuple[Dict[str, JSONSchema], Dict[str, Any], Dict[str, str]]):
        # in place: trees compiled earlier hold a reference to the registry dict
        for current, previous in zip((self.schema_cache, self.document_cache, self._drafts), saved):
            current.clear()
            current.update(previous)

    def _reset_anonymous(self):
        # earlier anonymous trees keep the previous registry, so their references stay valid
        self.schema_cache = {k: v for k, v in self.schema_cache.items() if not k.startswith('#')}
        self.document_cache.pop('', None)
        self._drafts.pop('', None)

    def _parse_document(self, document: Any, uri: Optional[str]) -> JSONSchema:
        draft = DRAFT_2020_12
        if isinstance(document, dict) and isinstance(document.get('$schema'), str):
            draft = draft_of(document['$schema'], draft)
        self.document_cache[uri or ''] = document
        self._drafts[uri or ''] = draft
        return self._parse_schema(document, uri, ROOT_POINTER, draft)

    def _load_document(self, document_uri: str, reference: str):
        try:
            content = self.uri_resolver(document_uri)
            document = parse_schema_text(content, document_uri)
        except Exception as e:
            raise SchemaError(f"Can't load schema document {document_uri} for reference {reference}") from e
        logger.debug("Loaded schema document %s", document_uri)
        self._parse_document(document, document_uri)

    @staticmethod
    def _location_string(uri: Optional[str], pointer: JsonPointer) -> str:
        return (uri or '') + pointer_to_fragment(pointer)

    def _error(self, message: str, uri: Optional[str], pointer: JsonPointer) -> SchemaError:
        return SchemaError(message, self._location_string(uri, pointer))

    def _register(self, key: str, schema: JSONSchema):
        self.schema_cache[key] = schema

    def _parse_schema(self, value: Any, uri: Optional[str], pointer: JsonPointer, draft: str) -> JSONSchema:
        if value is True:
            result = TrueSchema(uri, pointer)
        elif value is False:
            result = FalseSchema(uri, pointer)
        elif isinstance(value, dict):
            return self._parse_object(value, uri, pointer, draft)
        else:
            raise self._error('Schema is not boolean or object', uri, pointer)
        self._register(result.key, result)
        return result

    def _parse_object(self, schema: Dict[str, Any], uri: Optional[str], pointer: JsonPointer,
                      draft: str) -> JSONSchema:
        schema_version = schema.get('$schema')
        if schema_version is not None:
            if not isinstance(schema_version, str):
                raise self._error('$schema must be a string', uri, child_pointer(pointer, '$schema'))
            draft = draft_of(schema_version, draft)

        keys = [registry_key(uri, pointer.path)]
        anchors = []
        ref_only = draft in (DRAFT_07, DRAFT_04) and '$ref' in schema
        id_keyword = 'id' if draft == DRAFT_04 else '$id'
        schema_id = schema.get(id_keyword) if not ref_only else None
        if schema_id is not None:
            if not isinstance(schema_id, str):
                raise self._error(f'{id_keyword} must be a string', uri, child_pointer(pointer, id_keyword))
            if schema_id.startswith('#'):
                anchors.append(schema_id[1:])
            else:
                uri = strip_fragment(resolve_uri(uri, schema_id))
                pointer = ROOT_POINTER
                self.document_cache[uri or ''] = schema
                self._drafts[uri or ''] = draft
                keys.append(registry_key(uri, ''))
        for anchor_keyword in ('$anchor', '$dynamicAnchor'):
            if anchor_keyword in schema and not ref_only:
                anchor = schema[anchor_keyword]
                if not isinstance(anchor, str):
                    raise self._error(f'{anchor_keyword} must be a string', uri,
                                      child_pointer(pointer, anchor_keyword))
                anchors.append(anchor)

        for defs_keyword in ('$defs', 'definitions'):
            if defs_keyword in schema:
                self._parse_definitions(schema[defs_keyword], uri, child_pointer(pointer, defs_keyword), draft)

        if ref_only:
            children = [self._parse_ref(schema['$ref'], uri, child_pointer(pointer, '$ref'))]
        else:
            children = []
            for key, value in schema.items():
                if key == 'dependencies':
                    children.extend(self._parse_dependencies(value, uri, child_pointer(pointer, key), draft))
                    continue
                child = self._parse_keyword(key, value, schema, uri, pointer, draft)
                if child is not None:
                    children.append(child)

        title = schema.get('title')
        description = schema.get('description')
        result = SubSchema(uri, pointer, children, schema_version,
                           title if isinstance(title, str) else None,
                           description if isinstance(description, str) else None)
        for key in keys:
            self._register(key, result)
        for anchor in anchors:
            self._register(registry_key(uri, anchor), result)
        return result

    def _parse_definitions(self, definitions: Any, uri: Optional[str], pointer: JsonPointer, draft: str):
        if not isinstance(definitions, dict):
            raise self._error('Definitions must be an object', uri, pointer)
        for name, value in definitions.items():
            self._parse_schema(value, uri, child_pointer(pointer, name), draft)

    def _parse_keyword(self, key: str, value: Any, schema: Dict[str, Any], uri: Optional[str],
                       pointer: JsonPointer, draft: str) -> Optional[JSONSchema]:
        location = child_pointer(pointer, key)
        if key in IDENTITY_KEYWORDS or key in ANNOTATION_KEYWORDS or (key == 'id' and draft == DRAFT_04):
            return None
        if key in REFERENCE_KEYWORDS:
            return self._parse_ref(value, uri, location)
        if key == 'type':
            return self._parse_type(value, uri, location)
        if key in NUMBER_KEYWORDS:
            if draft == DRAFT_04 and key in DRAFT_04_BOUNDS.values():
                if not isinstance(value, bool):
                    raise self._error(f'{key} must be boolean', uri, location)
                return None
            if not is_number(value):
                raise self._error(f'{key} must be a number', uri, location)
            if key == 'multipleOf' and value <= 0:
                raise self._error('multipleOf must be greater than zero', uri, location)
            condition = NUMBER_KEYWORDS[key]
            if draft == DRAFT_04 and schema.get(DRAFT_04_BOUNDS.get(key)) is True:
                condition = NUMBER_KEYWORDS[DRAFT_04_BOUNDS[key]]
            return NumberValidator(uri, location, condition, value)
        if key in STRING_KEYWORDS:
            return StringValidator(uri, location, STRING_KEYWORDS[key], self._non_negative(value, uri, location))
        if key in ARRAY_KEYWORDS:
            return ArrayValidator(uri, location, ARRAY_KEYWORDS[key], self._non_negative(value, uri, location))
        if key in PROPERTIES_KEYWORDS:
            return PropertiesValidator(uri, location, PROPERTIES_KEYWORDS[key],
                                       self._non_negative(value, uri, location))
        if key == 'pattern':
            if not isinstance(value, str):
                raise self._error('pattern must be a string', uri, location)
            return PatternValidator(uri, location, value, self._compile_regex(value, uri, location))
        if key == 'format':
            return self._parse_format(value, uri, location)
        if key == 'uniqueItems':
            if not isinstance(value, bool):
                raise self._error('uniqueItems must be boolean', uri, location)
            return UniqueItemsValidator(uri, location) if value else None
        if key == 'required':
            return RequiredValidator(uri, location, self._string_list(value, uri, location))
        if key == 'dependentRequired':
            if not isinstance(value, dict):
                raise self._error('dependentRequired must be an object', uri, location)
            return DependentRequiredValidator(uri, location, {
                name: self._string_list(names, uri, child_pointer(location, name)) for name, names in value.items()})
        if key == 'dependentSchemas':
            if not isinstance(value, dict):
                raise self._error('dependentSchemas must be an object', uri, location)
            return DependentSchemasSchema(uri, location, {
                name: self._parse_schema(s, uri, child_pointer(location, name), draft) for name, s in value.items()})
        if key == 'enum':
            if not isinstance(value, list):
                raise self._error('enum must be an array', uri, location)
            return EnumValidator(uri, location, value)
        if key == 'const':
            return ConstValidator(uri, location, value)
        if key == 'properties':
            if not isinstance(value, dict):
                raise self._error('properties must be an object', uri, location)
            return PropertiesSchema(uri, location, {
                name: self._parse_schema(s, uri, child_pointer(location, name), draft) for name, s in value.items()})
        if key == 'patternProperties':
            if not isinstance(value, dict):
                raise self._error('patternProperties must be an object', uri, location)
            return PatternPropertiesSchema(uri, location, [
                (pattern, self._compile_regex(pattern, uri, child_pointer(location, pattern)),
                 self._parse_schema(s, uri, child_pointer(location, pattern), draft))
                for pattern, s in value.items()])
        if key == 'additionalProperties':
            return self._parse_additional_properties(value, schema, uri, location, draft)
        if key == 'propertyNames':
            return PropertyNamesSchema(uri, location, self._parse_schema(value, uri, location, draft))
        if key == 'items':
            return self._parse_items(value, schema, uri, location, draft)
        if key == 'additionalItems':
            return self._parse_additional_items(value, schema, uri, location, draft)
        if key == 'prefixItems':
            return PrefixItemsSchema(uri, location, self._schema_list(value, uri, location, draft))
        if key == 'contains':
            return self._parse_contains(value, schema, uri, pointer, draft)
        if key in COMBINATION_KEYWORDS:
            return CombinationSchema(uri, location, COMBINATION_KEYWORDS[key],
                                     self._schema_list(value, uri, location, draft))
        if key == 'not':
            return NotSchema(uri, location, self._parse_schema(value, uri, location, draft))
        if key == 'if':
            return self._parse_if(value, schema, uri, pointer, draft)
        return self._parse_custom(key, value, uri, location)

    def _parse_custom(self, key: str, value: Any, uri: Optional[str], location: JsonPointer) -> Optional[JSONSchema]:
        if self.custom_validation_handler is None:
            return None
        return self.custom_validation_handler(key, uri, location, value)

    def _parse_ref(self, value: Any, uri: Optional[str], location: JsonPointer) -> RefSchema:
        if not isinstance(value, str):
            raise self._error(f'{location.parts[-1]} must be a string', uri, location)
        document_uri, fragment = split_uri(resolve_uri(uri, value))
        target_key = self._target_key(document_uri, fragment, self._location_string(uri, location))
        result = RefSchema(uri, location, target_key, self.schema_cache, value)
        self._pending_refs.append((result, document_uri, fragment))
        self._new_refs.append(result)
        return result

    def _target_key(self, document_uri: str, fragment: str, reference: str) -> str:
        if fragment.startswith('/'):
            try:
                fragment = JsonPointer(fragment).path
            except JsonPointerException as e:
                raise SchemaError(f"Invalid JSON Pointer in reference {reference}") from e
        return registry_key(document_uri or None, fragment)

    def _resolve_pending(self):
        while self._pending_refs:
            ref_schema, document_uri, fragment = self._pending_refs.pop(0)
            if ref_schema.target_key not in self.schema_cache:
                self._resolve_key(ref_schema.target_key, document_uri, fragment,
                                  ref_schema.absolute_location or self._location_string(None, ref_schema.location))

    def _resolve_key(self, key: str, document_uri: str, fragment: str, reference: str):
        if registry_key(document_uri or None, '') not in self.schema_cache:
            if not document_uri:
                raise SchemaError(f"Can't resolve reference {reference}")
            self._load_document(document_uri, reference)
            if key in self.schema_cache:
                return
        if fragment and not fragment.startswith('/'):
            raise SchemaError(f"Can't resolve anchor \"{fragment}\" in reference {reference}")
        try:
            pointer = JsonPointer(fragment)
            value = pointer.resolve(self.document_cache[document_uri])
        except (JsonPointerException, KeyError) as e:
            raise SchemaError(f"Can't resolve JSON Pointer in reference {reference}") from e
        self._parse_schema(value, document_uri or None, pointer, self._drafts.get(document_uri, DRAFT_2020_12))

    @staticmethod
    def _same_instance_children(schema: JSONSchema) -> List[JSONSchema]:
        if isinstance(schema, SubSchema):
            return schema.children
        if isinstance(schema, CombinationSchema):
            return schema.schemas
        if isinstance(schema, NotSchema):
            return [schema.nested]
        if isinstance(schema, IfThenElseSchema):
            return [s for s in (schema.if_schema, schema.then_schema, schema.else_schema) if s is not None]
        if isinstance(schema, DependentSchemasSchema):
            return list(schema.dependencies.values())
        if isinstance(schema, RefSchema):
            return [schema.target]
        return []

    def _check_reference_loops(self):
        """Reject references that lead back to themselves without descending into the instance."""
        state: Dict[int, bool] = {}
        for start in self._new_refs:
            if id(start) in state:
                continue
            state[id(start)] = False
            stack = [(start, iter(self._same_instance_children(start)))]
            while stack:
                schema, children = stack[-1]
                child = next(children, None)
                if child is None:
                    state[id(schema)] = True
                    stack.pop()
                elif id(child) not in state:
                    state[id(child)] = False
                    stack.append((child, iter(self._same_instance_children(child))))
                elif not state[id(child)]:
                    index = next(i for i, (s, _) in enumerate(stack) if s is child)
                    loop = [s for s, _ in stack[index:] if isinstance(s, RefSchema)]
                    ref_schema = loop[0] if loop else start
                    raise SchemaError('Reference loop',
                                      ref_schema.absolute_location or self._location_string(None, ref_schema.location))

    def _parse_type(self, value: Any, uri: Optional[str], location: JsonPointer) -> TypeValidator:
        types = [value] if isinstance(value, str) else value
        if not isinstance(types, list) or not all(isinstance(t, str) and t in JSON_TYPES for t in types):
            raise self._error('type must be a JSON type name or an array of them', uri, location)
        return TypeValidator(uri, location, types)

    def _parse_format(self, value: Any, uri: Optional[str], location: JsonPointer) -> Optional[FormatValidator]:
        if not isinstance(value, str):
            raise self._error('format must be a string', uri, location)
        if not self.validate_formats:
            return None
        checker = FORMAT_CHECKERS.get(value)
        if checker is None and self.nonstandard_format_handler is not None:
            checker = self.nonstandard_format_handler(value)
        if checker is None:
            logger.debug("Unknown format \"%s\" at %s treated as annotation", value,
                         self._location_string(uri, location))
            return None
        return FormatValidator(uri, location, value, checker)

    def _parse_dependencies(self, value: Any, uri: Optional[str], location: JsonPointer,
                            draft: str) -> List[JSONSchema]:
        if not isinstance(value, dict):
            raise self._error('dependencies must be an object', uri, location)
        required = {}
        schemas = {}
        for name, dependency in value.items():
            if isinstance(dependency, list):
                required[name] = self._string_list(dependency, uri, child_pointer(location, name))
            else:
                schemas[name] = self._parse_schema(dependency, uri, child_pointer(location, name), draft)
        nodes: List[JSONSchema] = []
        if required:
            nodes.append(DependentRequiredValidator(uri, location, required))
        if schemas:
            nodes.append(DependentSchemasSchema(uri, location, schemas))
        return nodes

    def _parse_additional_properties(self, value: Any, schema: Dict[str, Any], uri: Optional[str],
                                     location: JsonPointer, draft: str) -> AdditionalPropertiesSchema:
        properties = schema.get('properties')
        pattern_properties = schema.get('patternProperties')
        names = list(properties) if isinstance(properties, dict) else []
        patterns = [self._compile_regex(p, uri, location) for p in pattern_properties] \
            if isinstance(pattern_properties, dict) else []
        return AdditionalPropertiesSchema(uri, location, self._parse_schema(value, uri, location, draft),
                                          names, patterns)

    def _parse_items(self, value: Any, schema: Dict[str, Any], uri: Optional[str], location: JsonPointer,
                     draft: str) -> JSONSchema:
        if isinstance(value, list):
            return PrefixItemsSchema(uri, location, self._schema_list(value, uri, location, draft))
        prefix_items = schema.get('prefixItems')
        start_index = len(prefix_items) if isinstance(prefix_items, list) else 0
        return ItemsSchema(uri, location, self._parse_schema(value, uri, location, draft), start_index)

    def _parse_additional_items(self, value: Any, schema: Dict[str, Any], uri: Optional[str],
                                location: JsonPointer, draft: str) -> Optional[ItemsSchema]:
        items = schema.get('items')
        if not isinstance(items, list):
            return None
        return ItemsSchema(uri, location, self._parse_schema(value, uri, location, draft), len(items))

    def _parse_contains(self, value: Any, schema: Dict[str, Any], uri: Optional[str], pointer: JsonPointer,
                        draft: str) -> ContainsSchema:
        location = child_pointer(pointer, 'contains')
        min_contains = 1
        max_contains = None
        if 'minContains' in schema:
            min_contains = self._non_negative(schema['minContains'], uri, child_pointer(pointer, 'minContains'))
        if 'maxContains' in schema:
            max_contains = self._non_negative(schema['maxContains'], uri, child_pointer(pointer, 'maxContains'))
        return ContainsSchema(uri, location, self._parse_schema(value, uri, location, draft),
                              min_contains, max_contains)

    def _parse_if(self, value: Any, schema: Dict[str, Any], uri: Optional[str], pointer: JsonPointer,
                  draft: str) -> IfThenElseSchema:
        branches = {}
        for keyword in ('then', 'else'):
            if keyword in schema:
                branches[keyword] = self._parse_schema(schema[keyword], uri, child_pointer(pointer, keyword), draft)
        location = child_pointer(pointer, 'if')
        return IfThenElseSchema(uri, location, self._parse_schema(value, uri, location, draft),
                                branches.get('then'), branches.get('else'))

    def _schema_list(self, value: Any, uri: Optional[str], location: JsonPointer, draft: str) -> List[JSONSchema]:
        if not isinstance(value, list):
            raise self._error(f'{location.parts[-1]} must be an array of schemas', uri, location)
        return [self._parse_schema(item, uri, child_pointer(location, i), draft) for i, item in enumerate(value)]

    def _string_list(self, value: Any, uri: Optional[str], location: JsonPointer) -> List[str]:
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            raise self._error(f'{location.parts[-1]} must be an array of strings', uri, location)
        return value

    def _non_negative(self, value: Any, uri: Optional[str], location: JsonPointer) -> int:
        if not is_integer(value) or value < 0:
            raise self._error(f'{location.parts[-1]} must be a non-negative integer', uri, location)
        return int(value)

    def _compile_regex(self, pattern: str, uri: Optional[str], location: JsonPointer):
        try:
            return re.compile(ecma_regex(pattern))
        except re.error as e:
            raise self._error(f'Invalid regular expression "{pattern}"', uri, location) from e


def compile(schema: Any, uri: Optional[str] = None,  # pylint: disable=redefined-builtin
            uri_resolver: Optional[Callable[[str], Any]] = None,
            custom_validation_handler: Optional[CustomValidationHandler] = None) -> JSONSchema:
    """
    Compile a schema document with a new parser.

    Args:
        schema: The parsed schema document.
        uri (str | None): The URI of the document, used to resolve relative references.
        uri_resolver: The loader for referenced documents.
        custom_validation_handler: The handler for unrecognised keywords.

    Returns:
        JSONSchema: The compiled schema.
    """
    parser = Parser(uri_resolver)
    parser.custom_validation_handler = custom_validation_handler
    return parser.parse(schema, uri)


def compile_file(path: str, uri_resolver: Optional[Callable[[str], Any]] = None,
                 custom_validation_handler: Optional[CustomValidationHandler] = None) -> JSONSchema:
    """Compile a schema file (JSON or YAML) with a new parser."""
    parser = Parser(uri_resolver)
    parser.custom_validation_handler = custom_validation_handler
    return parser.parse_file(path)
