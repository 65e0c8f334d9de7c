"""
TidyDock - inspect and clean up a local Docker engine
"""

__version__ = '1.0.0'
