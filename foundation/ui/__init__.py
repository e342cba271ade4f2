"""
Foundation UI layer: view-models, dispatchers and navigation.
"""
from foundation.ui.dispatcher import UIDispatcher, AsyncioDispatcher, ImmediateDispatcher

__all__ = ["UIDispatcher", "AsyncioDispatcher", "ImmediateDispatcher"]
