"""Provider Probe - connectivity checks for generative-AI providers."""

__version__ = "0.1.0"
