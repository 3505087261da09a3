"""Configuration and rule models for web2md."""

from .config import ConversionOptions, GfmMode, RetainImages
from .rule import ElementPredicate, RenderContext, Rule, RuleFilter, filter_matches

__all__ = [
    "ConversionOptions",
    "ElementPredicate",
    "GfmMode",
    "RenderContext",
    "RetainImages",
    "Rule",
    "RuleFilter",
    "filter_matches",
]
