"""Socials Studio - AI-assisted social media content workflow.

Projects move through a per-platform workflow (hooks, body, CTAs, visuals,
...). Each step's options are generated by a language model, then selected,
edited or refined by the user directly or through a tool-calling assistant.
"""

__version__ = "0.1.0"
