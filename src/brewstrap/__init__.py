"""brewstrap — Homebrew bootstrap and service provisioning CLI."""

__version__ = "0.1.0"
