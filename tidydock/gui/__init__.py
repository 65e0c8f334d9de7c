"""
GUI Package for TidyDock
Qt building blocks shared by the presentation layer
"""

from .threads import EngineOperationThread

__all__ = ['EngineOperationThread']
