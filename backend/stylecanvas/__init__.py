"""StyleCanvas: artistic style filters for uploaded photos."""

__version__ = "0.1.0"
