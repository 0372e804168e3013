"""
Pytest configuration and fixtures.
"""
import os
import sys
from datetime import datetime, timezone

import pytest

# Add repo root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def now():
    """Fixed reference time so velocity scores are reproducible."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
