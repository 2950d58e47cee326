"""k0s cluster configuration templates, shell completion and Linux host helpers."""

__version__ = "0.1.0"