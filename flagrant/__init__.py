"""
Flagrant
========

Renders flags described in a small S-expression language to PNG images.

This package provides:
- A lexer and recursive-descent parser for flag definitions
- Tag resolution for reusing named sub-trees
- A recursive renderer that partitions the canvas into solid regions
- Pillow-based PNG output and a command line interface
"""

__version__ = "1.0.0"
__author__ = "Flagrant Team"
