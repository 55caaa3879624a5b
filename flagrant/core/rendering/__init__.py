"""
Rendering Module
================

Components:
- renderer: Recursive canvas partitioning and painting
- png_generator: PNG encoding and file output
"""
