"""Needledrop domain layer - pure business logic with zero infrastructure dependencies."""

from . import entities, errors, transforms
from .entities import Listen, Playlist, PlaylistDetail, ThrowbackPeriod
from .errors import NeedledropError

__all__ = [
    # Modules
    "entities",
    "errors",
    "transforms",
    # Key domain types
    "Listen",
    "NeedledropError",
    "Playlist",
    "PlaylistDetail",
    "ThrowbackPeriod",
]
