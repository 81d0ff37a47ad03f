"""Application services - use case orchestrators and business workflow coordination."""

from .curation_service import CurationService, create_curation_service

__all__ = [
    "CurationService",
    "create_curation_service",
]
