from pathlib import Path

import pytest

from mimic.storage import Storage


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    """A fresh JSON store under tmp_path for every test."""
    return Storage(tmp_path / "data")
