"""Test suite for the Neoflix favorites API.

Marking ``tests`` as a package lets pytest put the repository root on
``sys.path`` so ``neoflix`` and ``tests.neoflix.support`` import without an
editable install.
"""
