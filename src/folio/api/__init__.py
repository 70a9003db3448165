"""Folio HTTP API."""
