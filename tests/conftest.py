from __future__ import annotations

from pathlib import Path

import pytest

from nsbundle.models import Namespace
from tests._fixtures.page_builder import PageBuilder


@pytest.fixture
def page_builder(tmp_path: Path) -> PageBuilder:
    """Provide a reusable page tree rooted at the pytest tmp_path."""
    return PageBuilder(tmp_path)


@pytest.fixture
def namespace() -> Namespace:
    return Namespace("acme-")
