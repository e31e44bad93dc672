"""Traversal of OpenAPI documents.

The functions in this module locate the parts of a JSON-like document that a
rewrite rule cares about and hand them to a visitor. A visitor receives a
mapping and returns the node that should take its place, so rules may edit a
node in place or replace it wholesale.

Two locators are provided:

- ``visit_schema_objects`` finds every Schema Object by walking the known
  OpenAPI host locations (parameters, media types, headers, components, ...).
  Once inside a schema, the visitor recurses on its own with
  ``visit_subschemas``, which only follows JSON Schema keywords that hold
  schemas.
- ``visit_ref_objects`` finds every mapping carrying ``$ref``, anywhere.

Neither locator ever resolves a ``$ref``, so reference cycles in the document
are just leaves in the literal tree.
"""

from collections.abc import Callable
from typing import Any

__all__ = (
    'JsonNode',
    'SchemaVisitor',
    'RefVisitor',
    'walk_object',
    'walk_tree',
    'visit_subschemas',
    'visit_schema_objects',
    'visit_ref_objects',
    'is_ref',
)

JsonNode = dict[str, Any] | list[Any] | str | int | float | bool | None
SchemaVisitor = Callable[[dict[str, Any]], JsonNode]
RefVisitor = Callable[[dict[str, Any]], JsonNode]

HTTP_METHODS = ('get', 'put', 'post', 'delete', 'options', 'head', 'patch', 'trace')

# JSON Schema keywords whose value is a single schema
SCHEMA_KEYWORDS = (
    'items',
    'additionalItems',
    'not',
    'if',
    'then',
    'else',
    'contains',
    'propertyNames',
    'additionalProperties',
    'unevaluatedItems',
    'unevaluatedProperties',
    'contentSchema',
)
# ... a list of schemas
SCHEMA_LIST_KEYWORDS = ('allOf', 'anyOf', 'oneOf', 'prefixItems')
# ... a map of name to schema
SCHEMA_MAP_KEYWORDS = (
    'properties',
    'patternProperties',
    '$defs',
    'definitions',
    'dependentSchemas',
)


def is_ref(node: Any) -> bool:
    """Check if a node is a Reference Object (a mapping with a ``$ref`` key)."""
    return isinstance(node, dict) and '$ref' in node


def walk_object(node: JsonNode, visitor: Callable[[dict], JsonNode]) -> JsonNode:
    """Hand a node to a visitor.

    A mapping is passed to ``visitor`` and its return value is returned in its
    place. A sequence is walked element-wise and each element is replaced in
    place. Scalars and ``None`` are returned unchanged.

    The walker does not descend into the mapping itself; visitors that need to
    reach nested nodes call back into the walker on the values they care
    about. That way a visitor may drop a sub-tree without the walker tripping
    over it afterwards.
    """
    if isinstance(node, list):
        for index, item in enumerate(node):
            node[index] = walk_object(item, visitor)
        return node
    if isinstance(node, dict):
        return visitor(node)
    return node


def walk_tree(node: JsonNode, visitor: Callable[[dict], JsonNode]) -> JsonNode:
    """Visit every mapping in a tree, children first.

    Each value of a mapping is walked before ``visitor`` is invoked on the
    mapping, and the visitor's return value replaces the mapping in its
    parent. The key list is snapshotted first so a visitor may delete keys
    while the walk is in progress.
    """
    if isinstance(node, list):
        for index, item in enumerate(node):
            node[index] = walk_tree(item, visitor)
        return node
    if isinstance(node, dict):
        for key in list(node):
            if key in node:
                node[key] = walk_tree(node[key], visitor)
        return visitor(node)
    return node


def visit_subschemas(schema: dict[str, Any], visitor: SchemaVisitor) -> dict[str, Any]:
    """Replace every schema nested directly in ``schema`` with the visitor's result.

    Only JSON Schema keywords that hold schemas are followed, so values under
    ``example``, ``default``, ``enum`` and friends are never mistaken for
    schemas. Boolean schemas (``additionalProperties: false``) are left alone.
    """
    for keyword in SCHEMA_KEYWORDS:
        value = schema.get(keyword)
        if isinstance(value, (dict, list)):
            schema[keyword] = walk_object(value, visitor)

    for keyword in SCHEMA_LIST_KEYWORDS:
        value = schema.get(keyword)
        if isinstance(value, list):
            schema[keyword] = walk_object(value, visitor)

    for keyword in SCHEMA_MAP_KEYWORDS:
        value = schema.get(keyword)
        if isinstance(value, dict):
            for name in list(value):
                value[name] = walk_object(value[name], visitor)

    return schema


class _SchemaSiteLocator:
    """Walks the OpenAPI host structure and applies a visitor to each schema.

    There is one ``_visit_*`` method per OpenAPI object type that can carry a
    schema, directly or through its children. Each method tolerates missing
    or wrongly typed members.
    """

    def __init__(self, visitor: SchemaVisitor):
        self._visitor = visitor
        # id of each visited schema -> (schema, replacement); the schema is
        # kept so its id is not reused
        self._seen: dict[int, tuple[dict, Any]] = {}

    def _schema(self, container: dict, key: str) -> None:
        schema = container.get(key)
        if not isinstance(schema, dict):
            return
        if id(schema) in self._seen:
            container[key] = self._seen[id(schema)][1]
            return
        result = self._visitor(schema)
        self._seen[id(schema)] = (schema, result)
        container[key] = result
        if isinstance(result, dict):
            self._seen[id(result)] = (result, result)

    def _each(self, mapping: Any, visit: Callable[[dict], None]) -> None:
        if isinstance(mapping, dict):
            for value in list(mapping.values()):
                if isinstance(value, dict):
                    visit(value)

    def _each_in_list(self, items: Any, visit: Callable[[dict], None]) -> None:
        if isinstance(items, list):
            for item in items:
                if isinstance(item, dict):
                    visit(item)

    def visit_document(self, document: dict) -> None:
        self._each(document.get('paths'), self._visit_path_item)
        self._each(document.get('webhooks'), self._visit_path_item)
        components = document.get('components')
        if isinstance(components, dict):
            self._visit_components(components)

    def _visit_components(self, components: dict) -> None:
        schemas = components.get('schemas')
        if isinstance(schemas, dict):
            for name in list(schemas):
                self._schema(schemas, name)
        self._each(components.get('responses'), self._visit_response)
        self._each(components.get('parameters'), self._visit_parameter)
        self._each(components.get('requestBodies'), self._visit_request_body)
        self._each(components.get('headers'), self._visit_parameter)
        self._each(components.get('callbacks'), self._visit_callback)
        self._each(components.get('pathItems'), self._visit_path_item)

    def _visit_path_item(self, path_item: dict) -> None:
        self._each_in_list(path_item.get('parameters'), self._visit_parameter)
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if isinstance(operation, dict):
                self._visit_operation(operation)

    def _visit_operation(self, operation: dict) -> None:
        self._each_in_list(operation.get('parameters'), self._visit_parameter)
        request_body = operation.get('requestBody')
        if isinstance(request_body, dict):
            self._visit_request_body(request_body)
        self._each(operation.get('responses'), self._visit_response)
        self._each(operation.get('callbacks'), self._visit_callback)

    def _visit_callback(self, callback: dict) -> None:
        self._each(callback, self._visit_path_item)

    def _visit_parameter(self, parameter: dict) -> None:
        # Header Objects share the schema/content shape of Parameter Objects
        self._schema(parameter, 'schema')
        self._each(parameter.get('content'), self._visit_media_type)

    def _visit_request_body(self, request_body: dict) -> None:
        self._each(request_body.get('content'), self._visit_media_type)

    def _visit_response(self, response: dict) -> None:
        self._each(response.get('headers'), self._visit_parameter)
        self._each(response.get('content'), self._visit_media_type)

    def _visit_media_type(self, media_type: dict) -> None:
        self._schema(media_type, 'schema')
        self._each(media_type.get('encoding'), self._visit_encoding)

    def _visit_encoding(self, encoding: dict) -> None:
        self._each(encoding.get('headers'), self._visit_parameter)


def visit_schema_objects(document: dict[str, Any], visitor: SchemaVisitor) -> dict[str, Any]:
    """Apply ``visitor`` to every Schema Object at an OpenAPI host location.

    The visitor's return value replaces the schema in the document. Nested
    schemas are the visitor's business (see ``visit_subschemas``). A schema
    reachable through two host locations is visited once.

    Returns:
        The document, modified in place.
    """
    if isinstance(document, dict):
        _SchemaSiteLocator(visitor).visit_document(document)
    return document


def visit_ref_objects(node: JsonNode, visitor: RefVisitor) -> JsonNode:
    """Apply ``visitor`` to every Reference Object anywhere in ``node``.

    Works on a whole document or on any sub-tree, in schema and non-schema
    locations alike. Mappings without ``$ref`` are left as they are.

    Returns:
        The node, or its replacement if ``node`` itself is a Reference Object.
    """
    return walk_tree(node, lambda obj: visitor(obj) if is_ref(obj) else obj)
