"""Laterfeed - save links for later and read them back as an Atom feed."""

__version__ = "0.1.0"
