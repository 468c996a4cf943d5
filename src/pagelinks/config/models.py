"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pagelinks.toml only contains
overrides. An empty (or absent) file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel


class InterpreterConfig(BaseModel):
    """[interpreter] section."""

    model_config = {"frozen": True}

    skip_blank_lines: bool = True


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    summary: bool = True
