"""Render Terraform plan changes as pull request comments."""

from .config import CommenterConfig
from .service import PlanCommenterService

__version__ = "0.1.0"

__all__ = ["CommenterConfig", "PlanCommenterService", "__version__"]
