"""
Top-level package for git_semver.

This package exposes the main CLI entry point via the
``git_semver.cli`` module and the calculation itself via
:class:`git_semver.calculator.VersionCalculator`.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
