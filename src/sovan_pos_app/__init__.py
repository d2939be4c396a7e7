"""Headless Sepatu by Sovan point-of-sale app built on ``sovan_pos_sdk``."""

__version__ = "0.1.0"
