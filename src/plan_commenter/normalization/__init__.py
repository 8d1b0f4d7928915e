"""Classification and redaction of Terraform resource changes."""

from .action_classifier import ActionClassifier, PlanActionError
from .sensitive import NEW_SENSITIVE_VALUE, OLD_SENSITIVE_VALUE, SensitiveFieldRedactor

__all__ = [
    "ActionClassifier",
    "NEW_SENSITIVE_VALUE",
    "OLD_SENSITIVE_VALUE",
    "PlanActionError",
    "SensitiveFieldRedactor",
]
