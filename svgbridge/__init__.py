"""svgbridge: SVG document import/export into an in-memory shape model."""

__version__ = "0.1.0"
