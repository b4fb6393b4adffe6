"""Read existing PDF documents, rearrange their pages and write them back."""

__version__ = "0.1.0"

__all__ = [
    "document",
    "editor",
    "fontutil",
    "glyphs",
    "image",
    "imageinfo",
    "objects",
    "parser",
    "properties",
    "protection",
    "xref",
]