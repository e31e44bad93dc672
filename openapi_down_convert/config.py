import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from openapi_down_convert.exceptions import ConfigurationError, ScopeDescriptionError

DEFAULT_FILENAMES = ['openapi-down-convert.yaml', 'openapi-down-convert.yml']
PYPROJECT_TOOL_NAME = 'openapi-down-convert'

DEFAULT_AUTHORIZATION_URL = 'https://www.example.com/oauth2/authorize'
DEFAULT_TOKEN_URL = 'https://www.example.com/oauth2/token'


class ConverterOptions(BaseModel):
    """Options captured when a Converter is created.

    Fields not passed explicitly keep their defaults. Config files and
    ``OPENAPI_DOWN_CONVERT_*`` environment variables are only read by
    :func:`get_options`.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    verbose: bool = Field(False, description='Log each transformation performed.')

    delete_example_with_id: bool = Field(
        False,
        description='Drop schema examples whose first element is an object with an `id` property.',
    )

    allof_transform: bool = Field(
        False,
        description='Rewrite schema `$ref` objects that have siblings to `allOf: [{$ref}]`.',
    )

    authorization_url: str = Field(
        DEFAULT_AUTHORIZATION_URL,
        description='authorizationUrl used when converting openIdConnect schemes to oauth2.',
    )

    token_url: str = Field(
        DEFAULT_TOKEN_URL,
        description='tokenUrl used when converting openIdConnect schemes to oauth2.',
    )

    scope_description_file: str | None = Field(
        None, description='YAML or JSON file mapping scope names to descriptions.'
    )

    scope_descriptions: dict[str, str] = Field(
        default_factory=dict, description='Scope name to description lookup.'
    )

    convert_nullable_types: bool = Field(
        False,
        description='Rewrite `type: [T, "null"]` to `type: T` with `nullable: true`.',
    )

    def with_scope_descriptions(self) -> 'ConverterOptions':
        """Return a copy with the scope description file merged into the lookup.

        Entries given explicitly in ``scope_descriptions`` win over the file.

        Raises:
            ScopeDescriptionError: If the file cannot be read or parsed.
        """
        if not self.scope_description_file:
            return self
        loaded = load_scope_descriptions(self.scope_description_file)
        return self.model_copy(
            update={'scope_descriptions': {**loaded, **self.scope_descriptions}}
        )


class EnvironmentOptions(BaseSettings, ConverterOptions):
    """Converter options read from ``OPENAPI_DOWN_CONVERT_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix='OPENAPI_DOWN_CONVERT_', extra='ignore')


def load_yaml(path: str | Path):
    # JSON is a subset of YAML, so this reads both
    return yaml.safe_load(Path(path).read_text(encoding='utf-8'))


def load_scope_descriptions(path: str | Path | None) -> dict[str, str]:
    """Load a ``{scope: description}`` mapping from a YAML or JSON file.

    Args:
        path: Path of the file. ``None`` or an empty string yields an empty lookup.

    Returns:
        The scope descriptions.

    Raises:
        ScopeDescriptionError: If the file cannot be read, is not valid YAML/JSON,
            or does not contain a mapping.
    """
    if not path:
        return {}

    try:
        content = load_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        raise ScopeDescriptionError(str(path), cause=e)

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ScopeDescriptionError(
            str(path), reason='expected a mapping of scope names to descriptions'
        )
    # a scope listed without a description falls back to the placeholder
    return {
        str(scope): str(description)
        for scope, description in content.items()
        if description is not None
    }


def get_options(path: str | None = None, **overrides) -> ConverterOptions:
    """Load converter options from a file, or fall back to defaults.

    Lookup order when ``path`` is not given: ``openapi-down-convert.yaml`` or
    ``.yml`` in the current directory, then ``[tool.openapi-down-convert]`` in
    ``pyproject.toml``, then defaults alone. ``OPENAPI_DOWN_CONVERT_*``
    environment variables sit below the file and above the defaults.

    Args:
        path: Explicit config file (YAML or JSON).
        **overrides: Values that take precedence over the file, e.g. CLI flags.
            ``None`` values are ignored.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    overrides = {key: value for key, value in overrides.items() if value is not None}

    if path:
        return _validate(_read_config_file(path), overrides, path)

    cwd = Path(os.getcwd())

    for filename in DEFAULT_FILENAMES:
        candidate = cwd / filename
        if candidate.exists():
            return _validate(_read_config_file(candidate), overrides, str(candidate))

    pyproject_path = cwd / 'pyproject.toml'

    if pyproject_path.exists():
        import tomllib

        pyproject = tomllib.loads(pyproject_path.read_text())
        tools = pyproject.get('tool', {})

        if PYPROJECT_TOOL_NAME in tools:
            return _validate(tools[PYPROJECT_TOOL_NAME], overrides, str(pyproject_path))

    return _validate({}, overrides, None)


def _read_config_file(path: str | Path) -> dict:
    if not Path(path).exists():
        raise ConfigurationError('Config file not found', config_path=str(path))
    try:
        content = load_yaml(path)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f'Could not read config: {e}', config_path=str(path))
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError('Config must be a mapping', config_path=str(path))
    return content


def _validate(values: dict, overrides: dict, source: str | None) -> ConverterOptions:
    # option names may be written with dashes, as on the command line
    values = {str(key).replace('-', '_'): value for key, value in values.items()}
    try:
        environment = EnvironmentOptions().model_dump(exclude_unset=True)
        return ConverterOptions(**{**environment, **values, **overrides})
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc']) or None
        raise ConfigurationError(error['msg'], config_path=source, field=field)
