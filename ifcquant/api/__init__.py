"""Public API — unified entry point."""

from ifcquant.api.facade import FileTooLargeError, IfcQuant

__all__ = ["FileTooLargeError", "IfcQuant"]
