"""
Parsing of the cargo JSON message stream.
"""

from .messages import DEBUG_SYMBOL_BUNDLE_SUFFIX, MessageParser

__all__ = [
    "DEBUG_SYMBOL_BUNDLE_SUFFIX",
    "MessageParser",
]
