"""
gradle-coords.

Extracts Maven artifact coordinates from the dependency tree printed by
`gradle dependencies` and writes them as CSV, JSON or text.
"""

__version__ = "0.1.0"
