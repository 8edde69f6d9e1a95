"""
FileCabinet - personnel records kept in memory or in a fixed-width binary file.
"""

__version__ = "1.0.0"
