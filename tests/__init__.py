"""Test suite for the yamlcast package.

This package contains unit and integration tests validating scalar
classification of the built-in schemas, custom schema dispatch, node
to value conversion in both directions, and comment preserving YAML
emission.
"""
