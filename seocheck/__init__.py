"""Static SEO checks for Nuxt/Vue page sources."""

from .models import AnalysisReport
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = ["AnalysisReport", "Orchestrator", "__version__"]
