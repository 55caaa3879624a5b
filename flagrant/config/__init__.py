"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Canvas, output and logging settings
- logging: Structured logging configuration
"""
