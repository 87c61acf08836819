"""physolver - plug-in physics problem solver with context-aware dispatch."""

__version__ = "0.1.0"
