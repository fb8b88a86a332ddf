"""
sorty - checks that Rust crate, module and use declarations are sorted
"""

__version__ = "1.0.0"
