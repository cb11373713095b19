# file: core/service_locator.py

import logging
from typing import Callable, Any, Dict


class ServiceLocator:
    """
    A simple dependency container (Service Locator pattern).
    It manages service registration and resolution, supporting
    singleton and transient lifetimes.

    The application builds its own instance at start-up and hands it to the
    services that need it; there is no module-level instance.
    """
    def __init__(self):
        # Stores singleton instances
        self._singletons: Dict[str, Any] = {}
        # Stores factories for all services
        self._factories: Dict[str, Callable[[], Any]] = {}
        # Tracks which services are singletons
        self._is_singleton: Dict[str, bool] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def register(self, name: str, factory: Callable[[], Any], singleton: bool = True):
        """
        Registers a service with the locator.

        Args:
            name (str): The unique name to identify the service.
            factory (Callable): A zero-argument callable that creates an
                                instance of the service.
            singleton (bool): If True, only one instance is ever created (on first
                              request). If False, a new instance is created
                              every time it's resolved (transient).
        """
        if name in self._factories:
            self.logger.warning(f"Service '{name}' is being re-registered.")

        self._factories[name] = factory
        self._is_singleton[name] = singleton
        self._singletons.pop(name, None)

    def resolve(self, name: str) -> Any:
        """Resolves (gets) a service instance by its name."""
        if name not in self._factories:
            raise KeyError(f"Service '{name}' not found.")

        if not self._is_singleton[name]:
            return self._factories[name]()

        if name not in self._singletons:
            self._singletons[name] = self._factories[name]()
        return self._singletons[name]

    def __getitem__(self, name: str) -> Any:
        """Allows dictionary-style access, e.g., locator['config_loader']"""
        return self.resolve(name)

    def __contains__(self, name: str) -> bool:
        """Allows 'in' check, e.g., 'config_loader' in locator"""
        return name in self._factories
