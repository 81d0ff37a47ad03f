"""Domain interfaces following Clean Architecture principles.

These interfaces define the contracts for data access and remote services
without depending on infrastructure implementations.
"""

from .interfaces import (
    ArtistChooserProtocol,
    MusicServiceConnector,
    StoreProtocol,
)

__all__ = [
    "ArtistChooserProtocol",
    "MusicServiceConnector",
    "StoreProtocol",
]
