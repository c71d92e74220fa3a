"""Core utilities shared across Transcode Planner modules."""
