"""
Configuration loading for git_semver.

See :mod:`git_semver.config.loader` for the layering of command line
values, environment variables and the optional JSON config file.
"""

from .loader import ConfigError, VersionConfig, load_config  # noqa: F401
