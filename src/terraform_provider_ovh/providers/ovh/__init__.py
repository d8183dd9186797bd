"""OVH provider: resource handlers and their registration."""

from .registration import build_registry

__all__ = ['build_registry']
