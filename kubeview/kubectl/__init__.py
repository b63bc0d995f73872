"""kubectl collaborators: command execution and listing parsing."""

from .client import KubectlClient
from .listing import ListingOutput, parse_listing

__all__ = ["KubectlClient", "ListingOutput", "parse_listing"]
