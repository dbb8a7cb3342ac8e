"""Exceptions raised by contractlens.

Only construction-time problems raise. Per-query problems never do: every
stage returns a low-confidence sentinel result instead.
"""

from __future__ import annotations


class ContractLensError(Exception):
    """Base exception for contractlens errors."""

    pass


class ModelLoadError(ContractLensError):
    """Failed to load a tokenizer or tagger model file."""

    pass


class LexiconError(ContractLensError):
    """A dictionary file is missing or malformed."""

    pass


class ConfigurationError(ContractLensError):
    """Configuration file could not be read or is invalid."""

    pass


__all__ = [
    "ContractLensError",
    "ModelLoadError",
    "LexiconError",
    "ConfigurationError",
]
