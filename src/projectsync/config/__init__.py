"""Project config loading."""

from projectsync.config.loader import load_project_configs, parse_project_config

__all__ = ["load_project_configs", "parse_project_config"]
