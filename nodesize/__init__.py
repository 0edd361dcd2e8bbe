"""Connectivity-weighted node sizing for document-link graphs."""

__version__ = "0.3.0"
