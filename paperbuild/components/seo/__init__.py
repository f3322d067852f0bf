"""SEO component - preview images and JSON-LD structured data."""

from .component import (
    SCHEMA_CONTEXT,
    breadcrumb_structured_data,
    post_structured_data,
    resolve_og_image_url,
)

__all__ = [
    "SCHEMA_CONTEXT",
    "breadcrumb_structured_data",
    "post_structured_data",
    "resolve_og_image_url",
]
