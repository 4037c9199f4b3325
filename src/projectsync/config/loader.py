"""Load project configs from a directory of YAML documents."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from projectsync.exceptions import ConfigError
from projectsync.models.config import ProjectConfig

_LOG = logging.getLogger(__name__)

CONFIG_SUFFIXES = (".yaml", ".yml")


def _as_list(value: Any) -> list[Any]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if entry]


def parse_project_config(document: Any, *, source_file: str, fallback_owner: str = "") -> ProjectConfig:
    """Build a :class:`ProjectConfig` from one parsed YAML document.

    The document may nest project settings under a ``project`` key or put
    them at the top level.

    Raises:
        ConfigError: If the document is not a mapping, has no ``project.name``,
            names no owner (and there is no fallback), or fails validation.
    """
    if not document or not isinstance(document, dict):
        raise ConfigError("no usable YAML content found")

    project = document.get("project", document)
    if not isinstance(project, dict):
        raise ConfigError("no 'project' key found")

    name = str(project.get("name") or "").strip()
    if not name:
        raise ConfigError("project.name is required")

    owner = str(project.get("owner") or fallback_owner or "").strip()
    if not owner:
        raise ConfigError("owner missing and no fallback provided")

    try:
        return ProjectConfig(
            source_file=source_file,
            owner=owner,
            name=name,
            description=str(project.get("description") or ""),
            public=project.get("public") is True,
            fields=_as_list(document.get("fields")),
            views=_as_list(document.get("views")),
            automation=_as_list(document.get("automation")),
        )
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc


def load_project_configs(config_dir: Path, fallback_owner: str = "") -> list[ProjectConfig]:
    """Load every ``*.yaml`` / ``*.yml`` project config in *config_dir*.

    Files are read in sorted order. A file that cannot be read, parsed or
    validated is skipped with a warning; the rest still load.

    Args:
        config_dir: Directory holding one YAML document per project.
        fallback_owner: Owner used when a document does not name one.

    Returns:
        The valid configs. Empty if the directory does not exist.
    """
    if not config_dir.is_dir():
        _LOG.info("No project directory found at %s, nothing to do.", config_dir)
        return []

    configs: list[ProjectConfig] = []
    for path in sorted(p for p in config_dir.iterdir() if p.suffix in CONFIG_SUFFIXES and p.is_file()):
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            _LOG.warning("Skipping %s: unable to read file (%s).", path.name, exc)
            continue

        try:
            document = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            _LOG.warning("Skipping %s: could not parse YAML (%s).", path.name, exc)
            continue

        try:
            config = parse_project_config(document, source_file=path.name, fallback_owner=fallback_owner)
        except ConfigError as exc:
            _LOG.warning("Skipping %s: %s.", path.name, exc)
            continue

        _LOG.debug("Loaded project config %s from %s", config.name, path.name)
        configs.append(config)

    return configs
