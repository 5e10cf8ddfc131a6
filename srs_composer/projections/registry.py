"""
Projection Method Registry

Maps projection-method names (case-insensitive) to ProjectionMethod
variants. start() discovers every method module in this package.
"""
from srs_composer.projections.base import ProjectionMethod
from srs_composer.core import ProjectionDefinition
import importlib
import logging
import pkgutil
import pathlib
from typing import Dict, List, Optional, Type

logger = logging.getLogger(__name__)

# Modules in this package that are not projection methods
NON_METHOD_MODULES = ["base", "registry", "common", "__init__"]


def snake_to_pascal(snake_str: str) -> str:
    """Convert snake_case to PascalCase"""
    return ''.join(word.capitalize() for word in snake_str.split('_'))


class ProjectionRegistry:

    def __init__(self):
        """
        Registry of projection methods. Empty until start() or add().
        """
        self._names: Dict[str, Type[ProjectionMethod]] = {}
        self._methods: List[Type[ProjectionMethod]] = []
        self.started = False

    def start(self) -> 'ProjectionRegistry':
        """
        Discover and register the built-in methods. Safe to call again.
        """
        if self.started:
            return self
        package_name = "srs_composer.projections"
        package = importlib.import_module(package_name)
        package_path = pathlib.Path(package.__file__).parent
        for _, module_name, _ in pkgutil.iter_modules([str(package_path)]):
            if module_name in NON_METHOD_MODULES:
                continue
            module = importlib.import_module(f"{package_name}.{module_name}")
            self.add(getattr(module, snake_to_pascal(module_name) + "Projection"))
        self.started = True
        logger.info("Projection registry started with %d methods", len(self._methods))
        return self

    def add(self, method: Type[ProjectionMethod]) -> bool:
        """
        Register a projection method under all of its names.

        Returns:
            False if the method declares no names and was skipped

        Raises:
            ValueError: If the method overrides a field no definition has
        """
        if not method.NAMES:
            logger.warning("Skipping projection method %s without names", method.__name__)
            return False

        unknown = set(method.OVERRIDES) - set(ProjectionDefinition.field_names())
        if unknown:
            raise ValueError(
                f"Projection method {method.__name__} overrides unknown fields: {sorted(unknown)}"
            )

        self._methods.append(method)
        for name in method.NAMES:
            self._names[name.lower()] = method
        return True

    def get(self, name: Optional[str]) -> Optional[Type[ProjectionMethod]]:
        """Look up a method by any of its names, or None."""
        if not name:
            return None
        return self._names.get(name.lower())

    def list_names(self) -> List[str]:
        return sorted(self._names)


# Default registry shared by all composers
PROJECTIONS = ProjectionRegistry()
