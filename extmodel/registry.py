"""
Component Registry

In-memory index of every known Component, keyed by (component class,
project). Created once by the hosting process and passed to whatever
parses or queries; upserts replace whole components atomically.
"""

from threading import RLock
from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from extmodel.ast.models import Component, WidgetDeclaration
from extmodel.configs.constants import TYPE_NAMESPACES, XTYPE_NAMESPACE
from extmodel.configs.logging import get_logger
from extmodel.exceptions import RegistryError

logger = get_logger("registry")

_components_adapter = TypeAdapter(list[Component])


def _alias_matches(entry: WidgetDeclaration, alias: str) -> bool:
    if entry.name == alias or entry.name == f"{XTYPE_NAMESPACE}.{alias}":
        return True
    return bool(entry.namespace) and entry.name == f"{entry.namespace}.{alias}"


def _type_matches(entry: WidgetDeclaration, alias: str) -> bool:
    if entry.name == alias:
        return True
    if entry.namespace and f"{entry.namespace}.{entry.name}" == alias:
        return True
    return any(entry.name == f"{ns}.{alias}" for ns in TYPE_NAMESPACES)


def _xtype_matches(entry: WidgetDeclaration, alias: str) -> bool:
    return entry.name == alias or f"{XTYPE_NAMESPACE}.{entry.name}" == alias


class ComponentRegistry:
    """
    Thread-safe component index.

    Entries keep insertion order; replacing a component keeps its slot.
    """

    def __init__(self) -> None:
        self._components: list[Component] = []
        self._lock = RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._components)

    def upsert(self, components: Iterable[Component]) -> int:
        """
        Insert components, replacing any entry with the same key.

        Args:
            components: Components to index

        Returns:
            Number of components upserted
        """
        count = 0
        with self._lock:
            for component in components:
                key = component.key
                for index, existing in enumerate(self._components):
                    if existing.key == key:
                        self._components[index] = component
                        logger.debug(f"Replaced {component.component_class} ({component.project})")
                        break
                else:
                    self._components.append(component)
                    logger.debug(f"Added {component.component_class} ({component.project})")
                count += 1
        return count

    def components(self, project: Optional[str] = None) -> list[Component]:
        """Snapshot of indexed components, optionally for one project."""
        with self._lock:
            if project is None:
                return list(self._components)
            return [c for c in self._components if c.project == project]

    def get_by_class_name(self, name: str, project: str) -> Optional[Component]:
        """
        Find a component by class name, falling back to alias lookup.

        Args:
            name: Fully qualified class name, or an alias/xtype/type
            project: Project scope

        Returns:
            The matching component or None
        """
        with self._lock:
            for component in self._components:
                if component.component_class == name and component.project == project:
                    return component
            return self.get_by_alias(name, project=project)

    def get_by_alias(self, alias: str, namespace: Optional[str] = None, project: str = "") -> Optional[Component]:
        """
        Find the first component in `project` declaring `alias`.

        Each component's aliases are checked first, then its types, then its
        xtypes.

        Args:
            alias: Alias, xtype or type name, with or without its namespace
            namespace: Only consider components indexed under this workspace namespace
            project: Project scope; other projects are never searched

        Returns:
            The matching component or None
        """
        with self._lock:
            for component in self._components:
                if component.project != project:
                    continue
                if namespace is not None and component.namespace != namespace:
                    continue
                if any(_alias_matches(entry, alias) for entry in component.aliases):
                    return component
                if any(_type_matches(entry, alias) for entry in component.types):
                    return component
                if any(_xtype_matches(entry, alias) for entry in component.xtypes):
                    return component
        return None

    def clear(self) -> None:
        with self._lock:
            self._components = []

    # --- Snapshots ---

    def dump_json(self, project: Optional[str] = None, indent: Optional[int] = None) -> str:
        """Serialize indexed components to JSON."""
        return _components_adapter.dump_json(self.components(project), indent=indent).decode("utf-8")

    def load_json(self, text: str) -> int:
        """
        Upsert components from a JSON snapshot.

        Returns:
            Number of components loaded

        Raises:
            RegistryError: If the snapshot is malformed
        """
        try:
            components = _components_adapter.validate_json(text)
        except ValidationError as e:
            raise RegistryError("Malformed component snapshot", {"errors": e.error_count()}) from e
        count = self.upsert(components)
        logger.info(f"Loaded {count} component(s) from snapshot")
        return count
