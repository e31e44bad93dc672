"""openapi-down-convert - convert OpenAPI 3.1 documents to OpenAPI 3.0.

OpenAPI 3.1 uses JSON Schema 2020-12; OpenAPI 3.0 uses a JSON Schema Draft-7
dialect. Many tools still only accept 3.0, so this package rewrites the 3.1
constructs they reject: schema ``examples`` and ``const``, Reference Objects
with siblings, and ``openIdConnect`` security schemes.

Quick Start:
    >>> from openapi_down_convert import Converter, ConverterOptions
    >>>
    >>> converter = Converter(document, ConverterOptions(verbose=True))
    >>> openapi30 = converter.convert()

CLI Usage:
    $ openapi-down-convert convert --input openapi.yaml --output openapi-3.0.yaml
    $ openapi-down-convert convert -i openapi.yaml --scopes scopes.yaml --allof
"""

from openapi_down_convert.config import ConverterOptions, get_options, load_scope_descriptions
from openapi_down_convert.converter import OPENAPI_30_VERSION, Converter, down_convert
from openapi_down_convert.exceptions import (
    ConfigurationError,
    DocumentLoadError,
    DownConvertError,
    OutputError,
    ScopeDescriptionError,
)
from openapi_down_convert.loader import dump_document, load_document

__all__ = [
    # Conversion
    'Converter',
    'down_convert',
    'OPENAPI_30_VERSION',
    # Configuration
    'ConverterOptions',
    'get_options',
    'load_scope_descriptions',
    # I/O
    'load_document',
    'dump_document',
    # Exceptions
    'DownConvertError',
    'ConfigurationError',
    'ScopeDescriptionError',
    'DocumentLoadError',
    'OutputError',
]

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version('openapi-down-convert')
except PackageNotFoundError:
    __version__ = 'unknown'
