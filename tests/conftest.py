"""Pytest configuration file."""

import os
import sys

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))

# Make the podfeed package and the shared test helpers importable
sys.path.insert(0, os.path.dirname(TESTS_DIR))
sys.path.insert(0, TESTS_DIR)
