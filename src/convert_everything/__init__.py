"""Convert Everything: a catalog of text, data, image, media and PDF converters."""

__version__ = "0.1.0"
