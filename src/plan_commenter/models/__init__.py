"""Data models for Terraform plan documents and resolved resource changes."""

from .change import ActionVerb, ChangeCategory, PlanChanges, PlanResult, ResolvedChange
from .plan import MISSING, PlanDocument, ResourceChange

__all__ = [
    "MISSING",
    "ActionVerb",
    "ChangeCategory",
    "PlanChanges",
    "PlanDocument",
    "PlanResult",
    "ResolvedChange",
    "ResourceChange",
]
