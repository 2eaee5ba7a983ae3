"""Bootstrap and repair tooling for a local Cube Studio environment."""

__version__ = "0.1.0"
