"""
Couchook Configuration Module
"""

from couchook.config.models import EventMap, ResourceSpec, RunnerSettings, Trait, Transitions

__all__ = [
    "RunnerSettings",
    "ResourceSpec",
    "Trait",
    "Transitions",
    "EventMap",
]
