"""
Test Data
=========

Sample flag definitions shared by unit and integration tests.
"""
