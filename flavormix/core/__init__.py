"""Core application modules."""

from .catalog import CatalogStore, FlavorRecord
from .pipeline import MixPipeline, MixOutcome, PipelineState

__all__ = ["CatalogStore", "FlavorRecord", "MixPipeline", "MixOutcome", "PipelineState"]
