"""Interactive terminal UI."""

from .browser import Browser, BrowserState, EntryList

__all__ = ["Browser", "BrowserState", "EntryList"]
