"""Pool and milestone-verification tables."""

from scholar_trust.registry.schema import MilestoneVerification, ScholarshipPool

__all__ = ["MilestoneVerification", "ScholarshipPool"]
