"""Editable user table backed by a REST users API."""

__version__ = "0.1.0"
