"""
BackendManager for tgzfs.
Keeps the registry of filesystem backends and constructs them by name.

Author: Tim Hosking
Contact: https://github.com/Munger
License: MIT
"""

from typing import Dict


class BackendManager:
    """
    Central registry of filesystem backends.
    Backends register themselves on class definition (see Filesystem.__init_subclass__).

    Usage example:
        BackendManager.register_backend('os', OSFS)
        backend_cls = BackendManager.get_backend('os')
        fs = BackendManager.open_filesystem('os', '/srv/data')
        BackendManager.deregister_backend('os')
    """
    _registry: Dict[str, type] = {}

    @classmethod
    def register_backend(cls, name: str, backend_cls: type):
        """
        Register a backend class under a name.
        Args:
            name: Backend name (e.g., 'os', 'embed')
            backend_cls: Filesystem subclass implementing the backend
        """
        cls._registry[name.lower()] = backend_cls

    @classmethod
    def deregister_backend(cls, name: str):
        """
        Remove a backend from the registry.
        """
        cls._registry.pop(name.lower(), None)

    @classmethod
    def get_backend(cls, name: str):
        """
        Get the backend class registered under name, or None.
        """
        return cls._registry.get(name.lower())

    @classmethod
    def get_all_backends(cls):
        """
        Return a dict of all registered backend classes: {name: backend_cls}
        """
        return dict(cls._registry)

    @classmethod
    def open_filesystem(cls, name: str, *args, **kwargs):
        """
        Construct a filesystem of the named backend.
        Raises:
            ValueError: If no backend is registered under name
        """
        backend_cls = cls.get_backend(name)
        if backend_cls is None:
            raise ValueError(f"No backend registered under '{name}'")
        return backend_cls(*args, **kwargs)
