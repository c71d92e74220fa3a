"""Transcode Planner - policy-driven transcode decisions from probe metadata."""

__version__ = "0.1.0"
