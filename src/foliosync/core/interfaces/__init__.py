"""
Interfaces for the collaborators the engine consumes.
"""

from .remote import EventHandler, ILocalCache, IPushChannel, IRemoteStore, Unsubscribe

__all__ = ["IRemoteStore", "IPushChannel", "ILocalCache", "EventHandler", "Unsubscribe"]
