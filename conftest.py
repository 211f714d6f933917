"""
Root conftest.py for pytest configuration

Registers the test type markers used across the suite.
"""
import os
import sys

# Add project root to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

MARKERS = {
    "unit": "Fast tests with no database",
    "integration": "Tests against a real SQLite database",
}


def pytest_configure(config):
    """Register custom markers"""
    for marker_name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{marker_name}: {description}")
