"""
Coup rules engine with host-authoritative multiplayer synchronization.
"""

__version__ = "0.1.0"
