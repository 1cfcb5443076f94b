"""
Wheel audio - generated tick and win sounds.
"""

from .engine import AudioEngine

__all__ = ["AudioEngine"]
