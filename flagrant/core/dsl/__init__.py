"""
DSL Processing Module
====================

Flag definition language processing.

Components:
- lexer: Tokenizing definition text
- parser: Recursive-descent parsing into a flag tree
- resolver: Tag and reference elimination
"""
