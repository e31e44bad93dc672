"""Down-convert an OpenAPI 3.1 document to OpenAPI 3.0.

The :class:`Converter` works on a private deep copy of the document it is
given and applies a fixed sequence of rewrite passes to it. Each pass is a
full traversal driven by one of the locators in
:mod:`openapi_down_convert.walker`.
"""

import copy
import json
import logging
from collections.abc import Iterator
from typing import Any

from openapi_down_convert.config import ConverterOptions
from openapi_down_convert.walker import (
    HTTP_METHODS,
    JsonNode,
    visit_ref_objects,
    visit_schema_objects,
    visit_subschemas,
)

__all__ = ('Converter', 'down_convert', 'OPENAPI_30_VERSION')

logger = logging.getLogger(__name__)

OPENAPI_30_VERSION = '3.0.3'


class Converter:
    """Converts an OpenAPI 3.1 document to OpenAPI 3.0.

    The input document is deep-copied on construction and is never modified.
    Scope descriptions are loaded from ``options.scope_description_file``
    right away, so a bad file fails here rather than in :meth:`convert`.

    Example:
        >>> converter = Converter(document, ConverterOptions(verbose=True))
        >>> openapi30 = converter.convert()

    Raises:
        ScopeDescriptionError: If the scope description file cannot be loaded.
    """

    def __init__(self, document: dict[str, Any], options: ConverterOptions | None = None):
        self.options = (options or ConverterOptions()).with_scope_descriptions()
        self.openapi30: dict[str, Any] = copy.deepcopy(document)

    def _log(self, message: str) -> None:
        if self.options.verbose:
            self._warn(message)

    def _warn(self, message: str) -> None:
        if not message.startswith('Warning'):
            message = f'Warning: {message}'
        logger.warning(message)

    @staticmethod
    def _json(value: Any) -> str:
        return json.dumps(value, indent=2, default=str)

    def convert(self) -> dict[str, Any]:
        """Convert the document to OpenAPI 3.0.

        Returns:
            The converted document. The input document is not modified.
        """
        self._log('Converting from OpenAPI 3.1 to 3.0')
        self.openapi30['openapi'] = OPENAPI_30_VERSION
        self.convert_schema_ref()
        self.simplify_non_schema_ref()
        self.convert_security_schemes()
        self.convert_json_schema_examples()
        self.convert_const_to_enum()
        self.convert_nullable_type_arrays()
        return self.openapi30

    def convert_schema_ref(self) -> None:
        """Replace ``{$ref: uri, ...}`` in schemas with ``{allOf: [{$ref: uri}], ...}``.

        This breaks some SDK generators (openapi-generator typescript-axios,
        typescript-angular), so it only runs when ``allof_transform`` is set.
        An existing ``allOf`` next to the ``$ref`` is kept after the new entry.
        """
        if not self.options.allof_transform:
            return

        def schema_visitor(schema: dict) -> JsonNode:
            if '$ref' in schema and len(schema) > 1:
                self._log(f'Converting JSON Schema $ref {self._json(schema)} to allOf: [ $ref ]')
                existing = schema.get('allOf')
                all_of = existing if isinstance(existing, list) else []
                replacement = {}
                for key, value in schema.items():
                    if key == '$ref':
                        replacement['allOf'] = [{'$ref': value}, *all_of]
                    elif key != 'allOf':
                        replacement[key] = value
                schema = replacement
            return visit_subschemas(schema, schema_visitor)

        visit_schema_objects(self.openapi30, schema_visitor)

    def simplify_non_schema_ref(self) -> None:
        """Reduce every Reference Object to a JSON Reference with only ``$ref``.

        OpenAPI 3.0 Reference Objects may not carry ``summary``, ``description``
        or any other sibling of ``$ref``.
        """

        def ref_visitor(node: dict) -> JsonNode:
            if len(node) == 1:
                return node
            self._log(f'Down convert reference object to JSON Reference:\n{self._json(node)}')
            for key in list(node):
                if key != '$ref':
                    del node[key]
            return node

        visit_ref_objects(self.openapi30, ref_visitor)

    def convert_security_schemes(self) -> None:
        """Down-convert ``openIdConnect`` security schemes to ``oauth2``.

        The scheme gets an authorization code flow whose URLs come from the
        options and whose scopes are every scope any security requirement asks
        of this scheme.
        """
        components = self.openapi30.get('components')
        schemes = components.get('securitySchemes') if isinstance(components, dict) else None
        if not isinstance(schemes, dict):
            return

        for scheme_name, scheme in schemes.items():
            if not isinstance(scheme, dict) or scheme.get('type') != 'openIdConnect':
                continue
            self._log('Converting openIdConnect security scheme to oauth2/authorizationCode')
            scheme['type'] = 'oauth2'
            open_id_connect_url = scheme.pop('openIdConnectUrl', None)
            scheme['description'] = 'OAuth2 Authorization Code Flow.'
            if open_id_connect_url:
                scheme['description'] += (
                    ' The client may GET the OpenID Connect configuration JSON from '
                    f'`{open_id_connect_url}` to get the correct `authorizationUrl` '
                    'and `tokenUrl`.'
                )
            scheme['flows'] = {
                'authorizationCode': {
                    'authorizationUrl': self.options.authorization_url,
                    'tokenUrl': self.options.token_url,
                    'scopes': self._oauth2_scopes(scheme_name),
                }
            }

    def _oauth2_scopes(self, scheme_name: str) -> dict[str, str]:
        scopes = {}
        for requirement in self._security_requirements():
            required_scopes = requirement.get(scheme_name)
            if not isinstance(required_scopes, list):
                continue
            for scope in required_scopes:
                scope = str(scope)
                scopes[scope] = (
                    self.options.scope_descriptions.get(scope)
                    or f"TODO: describe the '{scope}' scope"
                )
        return scopes

    def _security_requirements(self) -> Iterator[dict]:
        """Yield every Security Requirement Object in the document.

        Covers the document-level ``security`` list and the ``security`` list
        of each operation under ``paths`` and ``webhooks``. Operations without
        a ``security`` list are skipped.
        """
        yield from _dicts(self.openapi30.get('security'))
        for section in ('paths', 'webhooks'):
            path_items = self.openapi30.get(section)
            if not isinstance(path_items, dict):
                continue
            for path_item in path_items.values():
                if not isinstance(path_item, dict):
                    continue
                for method in HTTP_METHODS:
                    operation = path_item.get(method)
                    if isinstance(operation, dict):
                        yield from _dicts(operation.get('security'))

    def convert_json_schema_examples(self) -> None:
        """Replace schema ``examples`` with ``example: examples[0]``.

        JSON Schema 2020-12 has ``examples``; the Draft-7 dialect of OpenAPI 3.0
        only knows ``example``. With ``delete_example_with_id``, an example that
        is an object with an ``id`` is dropped instead (Spectral issue 2081).
        """

        def schema_visitor(schema: dict) -> JsonNode:
            examples = schema.get('examples')
            if isinstance(examples, list) and examples:
                del schema['examples']
                first = examples[0]
                if (
                    self.options.delete_example_with_id
                    and isinstance(first, dict)
                    and 'id' in first
                ):
                    self._log(f'Deleted schema example with `id` property:\n{self._json(examples)}')
                else:
                    schema['example'] = first
                    self._log(f'Replaces examples with examples[0]. Old examples:\n{self._json(examples)}')
            return visit_subschemas(schema, schema_visitor)

        visit_schema_objects(self.openapi30, schema_visitor)

    def convert_const_to_enum(self) -> None:
        """Replace schema ``const: value`` with ``enum: [value]``."""

        def schema_visitor(schema: dict) -> JsonNode:
            if 'const' in schema:
                constant = schema.pop('const')
                schema['enum'] = [constant]
                self._log(f'Converted const {self._json(constant)} to enum')
            return visit_subschemas(schema, schema_visitor)

        visit_schema_objects(self.openapi30, schema_visitor)

    def convert_nullable_type_arrays(self) -> None:
        """Replace ``type: [T, "null"]`` with ``type: T, nullable: true``.

        Only runs when ``convert_nullable_types`` is set. Type arrays naming
        more than one non-null type have no 3.0 equivalent and are left alone.
        """
        if not self.options.convert_nullable_types:
            return

        def schema_visitor(schema: dict) -> JsonNode:
            types = schema.get('type')
            if isinstance(types, list):
                others = [t for t in types if t != 'null']
                if len(others) > 1:
                    self._log(f'Cannot down convert type array {self._json(types)}')
                else:
                    if others:
                        schema['type'] = others[0]
                    else:
                        del schema['type']
                    if len(others) < len(types):
                        schema['nullable'] = True
                    self._log(f'Converted type array {self._json(types)}')
            return visit_subschemas(schema, schema_visitor)

        visit_schema_objects(self.openapi30, schema_visitor)


def _dicts(items: Any) -> Iterator[dict]:
    if isinstance(items, list):
        for item in items:
            if isinstance(item, dict):
                yield item


def down_convert(document: dict[str, Any], options: ConverterOptions | None = None) -> dict[str, Any]:
    """Convert ``document`` to OpenAPI 3.0 and return the result."""
    return Converter(document, options).convert()
