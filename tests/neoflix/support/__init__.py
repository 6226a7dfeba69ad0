"""Test doubles shared by the Neoflix test suite."""
