"""
Tracking module.

The canonical tracker implementation is in tracking.tracker.
"""

from .tracker import PresenceTracker, PresenceListener

__all__ = ["PresenceTracker", "PresenceListener"]
