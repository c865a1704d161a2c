"""OpenClaw: local configuration persistence and install-source resolution."""

__version__ = "2026.1.29"
