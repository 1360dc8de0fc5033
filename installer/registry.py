"""
Registry for installable components.

Components register themselves with the ``ComponentRegistry.register``
decorator. The registry hands them back in the fixed installation order.
"""

from typing import Any, Dict, List, Optional, Type

from installer.base_component import BaseComponent
from settings import config as static_config


class ComponentRegistry:
    """
    Registry for installable components.

    This class provides a registry for component classes to register
    themselves and methods for accessing registered components.
    """

    _registry: Dict[str, Type["BaseComponent"]] = {}

    @classmethod
    def register(cls, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Decorator for registering component classes.

        Args:
            name: The name of the component; also its CLI flag (``--<name>``).
            metadata: Optional metadata for the component, such as its
                      display name and description.

        Returns:
            A decorator function that registers the component class.

        Raises:
            ValueError: If the name is already registered or is not part of
                the fixed component order.
        """

        def decorator(
            component_class: Type["BaseComponent"],
        ) -> Type["BaseComponent"]:
            if name in cls._registry:
                raise ValueError(
                    f"Component with name '{name}' already registered"
                )
            if name not in static_config.COMPONENT_ORDER:
                raise ValueError(
                    f"Component '{name}' has no position in the installation order"
                )

            if metadata:
                component_class.metadata = metadata

            cls._registry[name] = component_class
            return component_class

        return decorator

    @classmethod
    def get_component(cls, name: str) -> Type["BaseComponent"]:
        """
        Get a component class by name.

        Raises:
            KeyError: If no component with the given name is registered.
        """
        if name not in cls._registry:
            raise KeyError(f"No component registered with name '{name}'")

        return cls._registry[name]

    @classmethod
    def ordered_names(cls) -> List[str]:
        """
        Names of all registered components in installation order.
        """
        return [
            name for name in static_config.COMPONENT_ORDER if name in cls._registry
        ]

    @classmethod
    def sort_names(cls, names: List[str]) -> List[str]:
        """
        Deduplicate ``names`` and sort them into installation order.

        Raises:
            KeyError: If any name is not registered.
        """
        for name in names:
            cls.get_component(name)
        wanted = set(names)
        return [name for name in cls.ordered_names() if name in wanted]
