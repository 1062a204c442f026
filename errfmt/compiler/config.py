"""Project configuration (errfmt.toml or [tool.errfmt] in pyproject.toml)."""
from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

CONFIG_NAME = "errfmt.toml"
PYPROJECT_NAME = "pyproject.toml"


class ConfigError(Exception):
    pass


@dataclass
class ErrfmtConfig:
    out_dir: str = ""        # Where generated modules go (default: next to the schema)
    werror: bool = False     # Treat warnings as errors
    header: bool = True      # Emit the "Generated by errfmt" comment
    path: Optional[Path] = None

    def validate(self) -> None:
        if not isinstance(self.out_dir, str):
            raise ConfigError(f"Invalid out_dir {self.out_dir!r}: expected a string.")
        for name in ("werror", "header"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"Invalid {name} {getattr(self, name)!r}: expected true or false.")

    def output_dir(self, schema_path: Path) -> Path:
        if not self.out_dir:
            return schema_path.parent
        base = self.path.parent if self.path is not None else schema_path.parent
        return base / self.out_dir


def load_config(directory: Path | None = None) -> ErrfmtConfig:
    """Load configuration for schemas in `directory` (default: cwd).

    Walking up from `directory`, the nearest errfmt.toml or pyproject.toml
    with a [tool.errfmt] table is used; errfmt.toml wins within a directory.
    Without one, defaults apply.
    """
    if directory is None:
        directory = Path.cwd()
    for candidate in (directory, *directory.parents):
        config_path = candidate / CONFIG_NAME
        if config_path.is_file():
            with open(config_path, "rb") as f:
                return _parse_config(_load(f, config_path), config_path)
        pyproject = candidate / PYPROJECT_NAME
        if pyproject.is_file():
            with open(pyproject, "rb") as f:
                data = _load(f, pyproject)
            table = data.get("tool", {}).get("errfmt")
            if table is not None:
                return _parse_config(table, pyproject)
    return ErrfmtConfig()


def load_config_from_string(text: str) -> ErrfmtConfig:
    """Load configuration from errfmt.toml text."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e
    return _parse_config(data, None)


def _load(f, path: Path) -> dict:
    try:
        return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _parse_config(data: dict, path: Optional[Path]) -> ErrfmtConfig:
    known = {f.name for f in fields(ErrfmtConfig) if f.name != "path"}
    unknown = sorted(set(data) - known)
    if unknown:
        where = f" in {path}" if path else ""
        raise ConfigError(f"Unknown errfmt option(s){where}: {', '.join(unknown)}")
    config = ErrfmtConfig(path=path, **{k: v for k, v in data.items() if k in known})
    config.validate()
    return config
