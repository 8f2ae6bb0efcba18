"""Bilingual quiz extraction from free-text language model responses."""

__version__ = "0.1.0"
