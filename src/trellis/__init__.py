"""
Trellis - theme trail and settings resolution

Trellis resolves theme configuration for a Drupal-style site tree:
theme trails, layered theme settings, extension and layout discovery,
library registration and the caches that sit in front of them.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
