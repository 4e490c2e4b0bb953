"""
tinycpp Command-Line Interface
==============================

- **tcpp**: translates a tinycpp source file into flattened C declarations

The tool is a Click application; exit codes are shared through
tinycpp.cli.errors.
"""

__all__ = ["tcpp"]
