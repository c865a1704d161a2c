"""Plugins: the host-side runtime surface exposed to channel plugins."""
