"""Pytest configuration shared across test modules."""

import os

os.environ["LINKRESOLVER_LOG_LEVEL"] = "DEBUG"
os.environ.pop("LINKRESOLVER_CONFIG", None)
