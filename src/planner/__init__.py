"""Planner - personal task planner with a chat assistant."""

__version__ = "0.1.0"
