"""Atomic components: models, ports and entry points, one package per concern."""
