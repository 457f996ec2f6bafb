"""Commit subject tag/scope checker for CI pipelines."""

__version__ = "0.3.0"
