import os
import sys

import pytest

# Add backend/ to path so tests can import backend modules directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

# Add scripts/ to path so tests can import the CLI scripts directly
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "scripts"))


@pytest.fixture
def sample_data_path():
    """The CSV sample shipped in data/ (8 students, 5 courses)."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "data"))
