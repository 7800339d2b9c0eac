"""Pytest configuration for minhypr tests."""

import os
import sys

# Add repository root to path so the package imports without installation
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
