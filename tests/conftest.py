import os

import pytest


@pytest.fixture(autouse=True)
def isolate_action_environment(monkeypatch):
    """Hide GitHub Actions variables of the surrounding CI run from tests.

    The CLI reads ``INPUT_*``, ``GITHUB_OUTPUT`` and ``GITHUB_REPOSITORY``
    from the environment, so values leaking in from the job running the
    test-suite would change its behaviour.
    """
    for name in list(os.environ):
        if name.startswith("INPUT_") or name in {"GITHUB_OUTPUT", "GITHUB_REPOSITORY"}:
            monkeypatch.delenv(name, raising=False)
    yield
