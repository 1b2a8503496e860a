"""Test package for radar-map-clustering.

This package contains:
- Unit tests (test_spatial.py, test_rendering.py, test_tools.py, test_view.py)
- HTTP action tests (test_actions.py)
- Integration tests (test_integration.py)
- Test configuration (conftest.py)
"""
