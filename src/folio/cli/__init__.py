"""Folio command line interface."""
