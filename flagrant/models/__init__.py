"""
Data Models
===========

Pydantic models for flag trees, render options and results.
"""
