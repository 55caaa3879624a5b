"""
Core Processing
===============

Parsing, tag resolution, rendering and the pipeline tying them together.
"""
