"""Drawing Chat - upload an architectural drawing, get it described, ask questions about it."""

__version__ = "1.0.0"
