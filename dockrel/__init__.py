"""Container image release orchestrator for browser-engine channels."""

__version__ = "0.1.0"
