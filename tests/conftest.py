"""
Pytest configuration and shared fixtures for Rextool tests.
"""
import os

# Tests must not pick up a developer's REXTOOL_* overrides.
for _name in [n for n in os.environ if n.startswith("REXTOOL_")]:
    del os.environ[_name]
