"""Rendering of documents and site-level pages."""

from bakehouse.rendering.renderer import Renderer
from bakehouse.rendering.tools import RenderingTool, RenderingTools

__all__ = ["Renderer", "RenderingTool", "RenderingTools"]
