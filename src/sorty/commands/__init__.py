"""
Command implementations for the sorty CLI
"""
