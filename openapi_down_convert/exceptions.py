"""Custom exceptions for openapi-down-convert.

This module defines the exceptions raised while loading documents, reading
configuration and writing converted output. The conversion itself is best
effort: oddly shaped corners of a document are skipped, never raised.
"""


class DownConvertError(Exception):
    """Base exception for all openapi-down-convert errors.

    Example:
        try:
            Converter(document, options).convert()
        except DownConvertError as e:
            print(f"conversion failed: {e}")
    """

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(DownConvertError):
    """Error in configuration.

    Attributes:
        config_path: The path to the configuration file, if applicable.
        field: The specific configuration field that is invalid.
    """

    def __init__(
        self, message: str, config_path: str | None = None, field: str | None = None
    ):
        self.config_path = config_path
        self.field = field
        full_message = message
        if config_path:
            full_message = f"{message} in '{config_path}'"
        if field:
            full_message += f' (field: {field})'
        super().__init__(full_message)


class ScopeDescriptionError(ConfigurationError):
    """The scope description file could not be read or parsed.

    Attributes:
        source: Path of the scope description file.
        cause: The underlying exception, if any.
    """

    def __init__(
        self, source: str, cause: Exception | None = None, reason: str | None = None
    ):
        self.source = source
        self.cause = cause
        self.reason = reason
        super().__init__('Failed to load scope descriptions', config_path=source)
        detail = reason or cause
        if detail:
            self.message = f'{self.message}: {detail}'
            self.args = (self.message,)


class DocumentLoadError(DownConvertError):
    """Failed to load an OpenAPI document from a source.

    Attributes:
        source: The source path or URL that failed to load.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, source: str, cause: Exception | None = None):
        self.source = source
        self.cause = cause
        message = f"Failed to load document from '{source}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)


class OutputError(DownConvertError):
    """Error writing the converted document.

    Attributes:
        output_path: The path where output was being written.
        cause: The underlying exception that caused the failure.
    """

    def __init__(self, output_path: str, cause: Exception | None = None):
        self.output_path = output_path
        self.cause = cause
        message = f"Failed to write output to '{output_path}'"
        if cause:
            message += f': {cause}'
        super().__init__(message)
