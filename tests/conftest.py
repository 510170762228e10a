import pytest

from tests.infrastructure.tree_sitter_utils import skip_if_no_tree_sitter  # noqa: F401


@pytest.fixture(autouse=True)
def _no_debug_env(monkeypatch):
    # Keep the environment from forcing DEBUG logging
    monkeypatch.delenv("TSOVERRIDE_DEBUG", raising=False)
