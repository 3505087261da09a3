"""Pydantic configuration models for web2md."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from .rule import ElementPredicate, Rule


class RetainImages(str, Enum):
    """How ordinary (non data-URL) images are rendered."""

    NONE = "none"
    ALT = "alt"
    ALT_P = "alt_p"
    ALL = "all"


class GfmMode(str, Enum):
    """Which GitHub-Flavored Markdown extensions are enabled."""

    ENABLED = "enabled"
    DISABLED = "disabled"
    TABLES_DISABLED = "tables_disabled"


class ConversionOptions(BaseModel):
    """
    Immutable snapshot of converter configuration.

    Example:
        options = ConversionOptions(retain_images="alt", no_gfm="table")
        options.gfm_mode  # GfmMode.TABLES_DISABLED
    """

    retain_images: RetainImages = Field(RetainImages.ALL, description="Image retention mode")
    no_gfm: Union[bool, Literal["table"]] = Field(
        False,
        description="Disable GFM entirely (True) or only its tables ('table')",
    )
    img_data_url_to_object_url: bool = Field(
        False,
        description="Replace data-URL images with a stable blob: placeholder",
    )
    custom_rules: dict[str, Rule] = Field(
        default_factory=dict,
        description="Extra rules by name; later entries take precedence",
    )
    custom_keep: Optional[ElementPredicate] = Field(
        None,
        description="Predicate for elements to keep as their original markup",
    )

    # Markdown style
    heading_style: Literal["setext", "atx"] = Field("setext", description="Style for h1/h2 headings")
    bullet_list_marker: Literal["*", "-", "+"] = Field("*", description="Marker for unordered lists")
    strong_em_symbol: Literal["*", "_"] = Field("*", description="Delimiter for emphasis and strong emphasis")

    model_config = {"extra": "forbid", "frozen": True, "arbitrary_types_allowed": True}

    @property
    def gfm_mode(self) -> GfmMode:
        """Resolved GFM mode from ``no_gfm``."""
        if self.no_gfm == "table":
            return GfmMode.TABLES_DISABLED
        if self.no_gfm:
            return GfmMode.DISABLED
        return GfmMode.ENABLED
