"""Craft optimized prompts for AI models, run them through chat sessions, and drive it all from a terminal interface."""

__version__ = "0.1.0"