"""Candidate/job matching engine package."""

__version__ = "0.1.0"

__all__ = [
    "main",
    "config",
    "models",
    "db",
    "scorer",
    "labels",
    "aggregator",
    "finder",
    "persister",
    "service",
    "triggers",
    "notifications",
    "exceptions",
    "utils",
]
