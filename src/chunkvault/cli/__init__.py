"""
Command line interface for Chunkvault.
"""
