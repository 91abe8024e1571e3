from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.tree_builder import DeclarationTreeBuilder


@pytest.fixture
def tree(tmp_path: Path) -> DeclarationTreeBuilder:
    """Provide a package root and scratch tree rooted at the pytest tmp_path."""
    return DeclarationTreeBuilder(tmp_path)
