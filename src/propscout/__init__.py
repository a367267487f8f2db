"""PropScout - map-driven property discovery and investment comparison."""

__version__ = "0.1.0"
