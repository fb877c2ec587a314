"""Owner and oracle authorization."""

from scholar_trust.access.control import AccessControl

__all__ = ["AccessControl"]
