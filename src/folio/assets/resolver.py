"""Derive asset store identifiers from hosted image URLs.

Hosted URLs look like::

    https://res.cloudinary.com/<cloud>/image/upload/v1712345678/posts/cover.jpg

The identifier is the path after the ``upload`` marker with the version
segment and file extension removed (``posts/cover``).
"""

import re

from folio.schemas.assets import AssetReference

UPLOAD_MARKER = "upload"

_EXTENSION = re.compile(r"\.[^/.]+$")


def resolve_identifier(url: str | None) -> str | None:
    """Derive an identifier from a hosted URL.

    Returns None when the URL is empty, has no ``upload`` marker, or nothing
    remains after the marker and version segment. Never raises.

    Examples:
        >>> resolve_identifier("https://host/img/upload/v17/folder/name.jpg")
        'folder/name'
        >>> resolve_identifier("https://host/no-upload-marker/x.png") is None
        True
    """
    if not url or not isinstance(url, str):
        return None

    parts = url.split("/")
    try:
        marker = parts.index(UPLOAD_MARKER)
    except ValueError:
        return None

    remainder = "/".join(parts[marker + 2 :])
    identifier = _EXTENSION.sub("", remainder)
    return identifier or None


def identifier_for(reference: AssetReference | None) -> str | None:
    """Explicit identifier when stored, else one derived from the URL."""
    if reference is None:
        return None
    if reference.identifier:
        return reference.identifier
    return resolve_identifier(reference.url)
