"""
Launch configuration synthesis and placeholder expansion.
"""

from .expand import expand_cargo
from .synthesizer import DEFAULT_PROGRAM, LaunchConfigSynthesizer, pretty_kind

__all__ = [
    "DEFAULT_PROGRAM",
    "LaunchConfigSynthesizer",
    "expand_cargo",
    "pretty_kind",
]
