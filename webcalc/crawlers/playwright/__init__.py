"""Playwright module for the deep search engine."""

from .browser import BrowserHandle, get_shared_browser_handle, locale_for
from .pages import configure_page

__all__ = [
    "BrowserHandle",
    "get_shared_browser_handle",
    "locale_for",
    "configure_page",
]
