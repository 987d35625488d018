"""Overlay components attached after the main geometry renders."""

from chartplan.components.conversion_tag import ConversionTag, attach_conversion_tag

__all__ = ["ConversionTag", "attach_conversion_tag"]
