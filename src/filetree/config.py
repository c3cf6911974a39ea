"""Configuration models with YAML loading.

Configuration is optional: every setting has a default, and a YAML file
only needs to name the values it overrides.

    root: /data/blobs
    persistent: true
    prefix: file_tree
"""

import os
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .errors import ConfigError
from .keyed import KeyedFileTree
from .tree import DEFAULT_PREFIX, FileTree

T = TypeVar("T", bound="ConfigModel")

ROOT_ENV_VAR = "FILETREE_ROOT"


class ConfigModel(BaseModel):
    """Base model with YAML loading/saving capabilities."""

    @classmethod
    def from_yaml(cls: type[T], path: Path) -> T:
        """
        Load and validate configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Validated configuration model instance

        Raises:
            ConfigError: On file not found, invalid YAML, or validation errors
        """
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(cls._format_yaml_error(e, path)) from e
        except OSError as e:
            raise ConfigError(f"Error reading configuration file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid {cls.__name__} configuration: {path.name} must contain a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(cls._format_validation_error(e, path)) from e

    @classmethod
    def load_or_default(cls: type[T], path: Path | None, **defaults) -> T:
        """
        Load from YAML or create with default values.

        Args:
            path: Optional path to YAML configuration file
            **defaults: Default values if file not provided

        Returns:
            Configuration model instance
        """
        if path and Path(path).exists():
            return cls.from_yaml(path)
        return cls(**defaults)

    def to_yaml(self, path: Path):
        """
        Write configuration to YAML file.

        Args:
            path: Path to write YAML file
        """
        with open(path, "w") as f:
            f.write(self.to_yaml_string())

    def to_yaml_string(self) -> str:
        """
        Convert configuration to YAML string.

        Returns:
            YAML formatted string of the configuration
        """
        return yaml.safe_dump(
            self.model_dump(mode="json", by_alias=True, exclude_unset=False),
            default_flow_style=False,
            sort_keys=False,
        )

    @classmethod
    def _format_validation_error(cls, error: ValidationError, path: Path) -> str:
        lines = [f"Invalid {cls.__name__} configuration: {path.name}"]
        for err in error.errors():
            field_path = ".".join(str(loc) for loc in err["loc"])
            if "missing" in err["type"]:
                lines.append(f"  Missing required field: {field_path}")
            else:
                lines.append(f"  {field_path}: {err['msg']}")
        return "\n".join(lines)

    @classmethod
    def _format_yaml_error(cls, error: yaml.YAMLError, path: Path) -> str:
        message = f"Invalid YAML syntax in: {path.name}"
        mark = getattr(error, "problem_mark", None)
        if mark is not None:
            message += f" (line {mark.line + 1}, column {mark.column + 1})"
        return message


class FileTreeConfig(ConfigModel):
    """Settings for building a FileTree."""

    root: Path | None = None
    """Tree root (persistent) or parent of the temporary root. None means the system temp dir."""

    persistent: bool = True
    """Keep the root on teardown."""

    prefix: str = DEFAULT_PREFIX
    """Name prefix for generated root directories."""

    @field_validator("prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v:
            raise ValueError("prefix must not be empty")
        if any(sep and sep in v for sep in ("/", os.sep, os.altsep)):
            raise ValueError("prefix must not contain path separators")
        return v

    @classmethod
    def from_env(cls) -> "FileTreeConfig":
        """Create a config from defaults plus environment overrides."""
        return cls().resolve()

    def resolve(self) -> "FileTreeConfig":
        """Fill ``root`` from FILETREE_ROOT when it is unset."""
        if self.root is None and os.environ.get(ROOT_ENV_VAR):
            return self.model_copy(update={"root": Path(os.environ[ROOT_ENV_VAR])})
        return self

    def build(self) -> FileTree:
        """Create a FileTree from these settings."""
        return FileTree(self.root, persistent=self.persistent, prefix=self.prefix)

    def build_keyed(self) -> KeyedFileTree:
        """Create a KeyedFileTree from these settings."""
        return KeyedFileTree(self.root, persistent=self.persistent, prefix=self.prefix)
