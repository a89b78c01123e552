"""Descriptor-driven plugin registries."""

from bakehouse.engines.loader import DescriptorEngineLoader, EngineUnavailable

__all__ = ["DescriptorEngineLoader", "EngineUnavailable"]
