"""notesite - render a tree of Markdown notes as a static HTML site."""

__version__ = "0.1.0"
