"""Infra: install-source archive resolution."""
