"""
Test Suite
==========

Test suite matching the flagrant/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: End-to-end pipeline and CLI tests
"""
