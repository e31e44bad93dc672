"""Reading and writing OpenAPI documents.

Documents are read from local files or HTTP(S) URLs, in YAML or JSON, and
written back as YAML unless the target file name ends in ``.json``.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import httpx
import yaml

from openapi_down_convert.exceptions import DocumentLoadError, OutputError

__all__ = ('is_url', 'load_document', 'dump_document', 'serialize_document')

logger = logging.getLogger(__name__)

JSON_SUFFIXES = ('.json',)


def is_url(text: str) -> bool:
    """Check if a string is an http(s) URL."""
    try:
        result = urlparse(text)
        return result.scheme in ('http', 'https') and bool(result.netloc)
    except ValueError:
        return False


def load_document(source: str, http_client: httpx.Client | None = None) -> dict[str, Any]:
    """Load an OpenAPI document from a URL or file path.

    Args:
        source: URL or file path of the document.
        http_client: Optional HTTP client to use for URL requests.

    Returns:
        The parsed document.

    Raises:
        DocumentLoadError: If the document cannot be fetched, read or parsed,
            or is not a mapping.
    """
    if is_url(source):
        content = _load_from_url(source, http_client)
    else:
        content = _load_from_file(source)

    if not isinstance(content, dict):
        raise DocumentLoadError(
            source, cause=ValueError('document root must be a mapping')
        )
    logger.debug(f"Loaded document from '{source}' (openapi {content.get('openapi')})")
    return content


def _load_from_url(url: str, http_client: httpx.Client | None) -> Any:
    try:
        if http_client:
            response = http_client.get(url)
        else:
            response = httpx.get(url, follow_redirects=True, timeout=30.0)

        response.raise_for_status()
        content_type = response.headers.get('content-type', '')
        text = response.text

        if 'json' in content_type or urlparse(url).path.endswith(JSON_SUFFIXES):
            return json.loads(text)
        return yaml.safe_load(text)

    except httpx.HTTPError as e:
        raise DocumentLoadError(url, cause=e)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentLoadError(url, cause=e)


def _load_from_file(file_path: str) -> Any:
    path = Path(file_path)

    if not path.exists():
        raise DocumentLoadError(
            file_path, cause=FileNotFoundError(f'File not found: {path}')
        )

    try:
        text = path.read_text(encoding='utf-8')
        if path.suffix.lower() in JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentLoadError(file_path, cause=e)
    except OSError as e:
        raise DocumentLoadError(file_path, cause=e)


def serialize_document(document: dict[str, Any], as_json: bool = False) -> str:
    """Serialize a document to YAML text, or to indented JSON text."""
    if as_json:
        return json.dumps(document, indent=2, ensure_ascii=False, default=str) + '\n'
    return yaml.safe_dump(
        document, sort_keys=False, allow_unicode=True, default_flow_style=False
    )


def dump_document(
    document: dict[str, Any],
    output: str | Path | None = None,
    stream: TextIO | None = None,
) -> None:
    """Write a document to a file, or to a stream when no file is given.

    The format is JSON when ``output`` ends in ``.json`` and YAML otherwise.
    Without ``output`` the document is written as YAML to ``stream``
    (standard output by default).

    Raises:
        OutputError: If the file cannot be written.
    """
    if output is None:
        (stream or sys.stdout).write(serialize_document(document))
        return

    path = Path(output)
    text = serialize_document(document, as_json=path.suffix.lower() in JSON_SUFFIXES)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
    except OSError as e:
        raise OutputError(str(output), cause=e)
    logger.debug(f"Wrote converted document to '{output}'")
