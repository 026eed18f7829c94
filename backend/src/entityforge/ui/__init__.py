"""Server-rendered UI for entities."""

from entityforge.ui.renderer import JinjaRenderer, PageRenderer, form_fields

__all__ = ["JinjaRenderer", "PageRenderer", "form_fields"]
