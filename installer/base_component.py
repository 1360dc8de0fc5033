"""
Base component class for all installable components.

This module provides the base class that all components must inherit from.
It defines the common interface the orchestrator relies on.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from settings.config_models import AppSettings


class BaseComponent(ABC):
    """
    Base class for all installable components.

    A component performs one linear installation routine. ``install`` returns
    False at the first failed step; it does not roll back earlier steps.
    """

    # Class-level metadata that can be overridden by subclasses or set by the registry decorator
    metadata: Dict[str, Any] = {
        "display_name": "",  # Name used in prompts and log messages
        "description": "",  # Description of the component
    }

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the component.

        Args:
            app_settings: The application settings, including the dry-run flag.
            logger: Optional logger instance. If not provided, a new logger will be created.
        """
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def symbols(self) -> Dict[str, str]:
        return self.app_settings.symbols

    @property
    def dry_run(self) -> bool:
        return self.app_settings.dry_run

    @abstractmethod
    def install(self) -> bool:
        """
        Install the component.

        Returns:
            True if the installation was successful, False otherwise.
        """
        pass

    def get_display_name(self) -> str:
        """
        Get the human readable name of the component.
        """
        return str(
            self.metadata.get("display_name") or self.__class__.__name__
        )
