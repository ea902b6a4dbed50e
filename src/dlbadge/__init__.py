"""dlbadge - render download-count badges from package registries."""

__version__ = "0.1.0"
