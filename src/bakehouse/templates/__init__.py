"""Template engines and the lazily bound template model."""

from bakehouse.templates.base import TemplateEngine
from bakehouse.templates.delegating import DelegatingTemplateEngine
from bakehouse.templates.model import TemplateModel
from bakehouse.templates.registry import ModelExtractors, ModelExtractorsDocumentTypeListener

__all__ = [
    "DelegatingTemplateEngine",
    "ModelExtractors",
    "ModelExtractorsDocumentTypeListener",
    "TemplateEngine",
    "TemplateModel",
]
