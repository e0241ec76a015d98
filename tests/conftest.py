import sys
import os

import pytest

# Add the project root directory (which contains the 'lunartide' folder) to the Python path
# This allows pytest to find the 'lunartide' package when running tests from the root directory
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from lunartide.models import Station  # noqa: E402
from lunartide.timeutils import DEFAULT_TIMEZONE  # noqa: E402


@pytest.fixture
def tz():
    return DEFAULT_TIMEZONE


@pytest.fixture
def scheveningen():
    return Station(id="SCHEVNGN", name="Scheveningen", latitude=52.1033, longitude=4.2664)
