"""Namespaced page bundler for embedding pages in third-party CMS code blocks."""

from __future__ import annotations

from .models import Namespace
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = ["Namespace", "Orchestrator", "__version__"]
