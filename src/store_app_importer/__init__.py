"""
Store App Importer - Imports store applications into a device-management backend.

Resolves package manifests and icons from the public store, creates the
application resource, and configures its group, all-devices, and
all-licensed-users assignments.
"""

__version__ = "1.0.0"


def __getattr__(name: str):
    """Lazy import for heavy dependencies."""
    if name == "ImportOrchestrator":
        from store_app_importer.core.orchestrator import ImportOrchestrator

        return ImportOrchestrator
    if name == "AppDescriptor":
        from store_app_importer.models.descriptor import AppDescriptor

        return AppDescriptor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ImportOrchestrator", "AppDescriptor", "__version__"]
