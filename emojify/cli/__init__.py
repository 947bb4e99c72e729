"""
CLI subpackage for command-line interface tools.

Available CLI scripts:
- run: Overlay expression images on the faces of a picture

Usage:
    python -m emojify.cli.run --help
"""

__all__ = ["run"]
