"""Folio - administrative content API.

Stores structured content records (posts, job listings, case studies, clients,
team members, inquiries) and keeps each record consistent with the images it
references in a remote asset store.
"""

from folio.version import __version__

__all__ = ["__version__"]
