"""Domain services."""

from .base import Service
from .identity_service import IdentityResolver, IdentityService
from .theme_service import ImportSummary, ThemeProgress, ThemeService
from .vote_ledger import VoteLedger, parse_vote_kind

__all__ = [
    "IdentityResolver",
    "IdentityService",
    "ImportSummary",
    "Service",
    "ThemeProgress",
    "ThemeService",
    "VoteLedger",
    "parse_vote_kind",
]
