"""Atom feed output."""

from .atom import FeedSerializer, render_feed, ATOM_CONTENT_TYPE

__all__ = ["FeedSerializer", "render_feed", "ATOM_CONTENT_TYPE"]
