"""paperbuild - scheduled, localized static blog builder."""

__version__ = "0.1.0"
