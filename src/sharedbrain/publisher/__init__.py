"""Backlink generation: link graph, rendering and output."""

from .generator import BacklinkGenerator, GenerateResult, GeneratorConfig, generate

__all__ = ["BacklinkGenerator", "GenerateResult", "GeneratorConfig", "generate"]
