"""Escrowed two-player board-game wagers settled by an arbiter, kept in memory."""

__version__ = "0.1.0"
__all__ = ["errors", "state", "program"]