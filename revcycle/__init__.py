"""revcycle: security and compliance layer of a healthcare revenue-cycle backend."""

__version__ = "0.1.0"
