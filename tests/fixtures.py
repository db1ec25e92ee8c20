# type: ignore
import pytest
from pathlib import Path

import synacor.sasm.masm as masm


@pytest.fixture
def with_stdio():
    base_dir = Path(__file__).parent.parent
    yield base_dir / 'lib' / 'stdio'


@pytest.fixture
def with_stdio_items(with_stdio):
    yield masm.collect_library(with_stdio)
