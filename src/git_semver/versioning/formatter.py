"""
Rendering of computed versions into strings.

Templates use ``${major}``, ``${minor}``, ``${patch}`` and
``${increment}`` placeholders. Each placeholder is substituted once;
anything else in the template is kept verbatim.
"""

from __future__ import annotations

from typing import Mapping

from .model import FormattedVersion, VersionState


def render(template: str, values: Mapping[str, object]) -> str:
    """Substitute ``${name}`` placeholders in ``template``."""
    rendered = template
    for name, value in values.items():
        rendered = rendered.replace("${" + name + "}", str(value), 1)
    return rendered


def format_version(
    state: VersionState,
    main_format: str,
    increment_format: str,
    delimiter: str,
    prefix: str,
) -> FormattedVersion:
    """Render ``state`` into version and tag strings.

    The release variants omit the increment. A state without an
    increment renders its full version as the release version.
    """
    main = render(
        main_format,
        {"major": state.major, "minor": state.minor, "patch": state.patch},
    )
    version = main
    if state.increment is not None:
        version = main + delimiter + render(increment_format, {"increment": state.increment})
    return FormattedVersion(
        version=version,
        tag=prefix + version,
        release_version=main,
        release_tag=prefix + main,
    )
