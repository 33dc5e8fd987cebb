"""
Command-line interface for merkle-tree.
"""
