"""
Condition Context.

Defines the read-only capability conditions evaluate against, and an
in-memory implementation backed by plain mappings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

from .properties import flatten_properties, load_properties


@runtime_checkable
class ConditionContext(Protocol):
    """
    What the engine needs from its environment.

    Every method must be idempotent and free of side effects; the engine
    relies on this but does not enforce it.
    """

    def properties_with_prefix(self, prefix: str) -> List[str]:
        """Return the keys under a dotted prefix, empty if none."""
        ...

    def property_value(self, name: str, default: Any = None) -> Tuple[Any, bool]:
        """Return (value, found) for a property, or (default, False)."""
        ...

    def find_bean(self, selector: Any) -> Tuple[Any, bool]:
        """Return (bean, found) for a selector, or (None, False)."""
        ...

    def active_profile(self) -> str:
        """Return the active profile, empty when none is set."""
        ...


class StaticContext:
    """
    ConditionContext over fixed properties, beans and profile.

    Property keys are flattened to dotted form and lower-cased, as are the
    names looked up against them. Bean selectors are either a bean name or
    a type; a type selector only resolves when exactly one bean is an
    instance of it.
    """

    def __init__(
        self,
        properties: Optional[Mapping[str, Any]] = None,
        beans: Optional[Mapping[str, Any]] = None,
        profile: str = "",
    ):
        """
        Initialize the context.

        Args:
            properties: Nested or dotted property mapping.
            beans: Beans keyed by name.
            profile: Active profile, empty for none.
        """
        self._properties: Dict[str, Any] = {
            key.lower(): value
            for key, value in flatten_properties(properties or {}).items()
        }
        self._beans: Dict[str, Any] = dict(beans or {})
        self._profile = profile

    @classmethod
    def from_yaml(
        cls,
        directory: Union[str, Path],
        profile: str = "",
        beans: Optional[Mapping[str, Any]] = None,
    ) -> "StaticContext":
        """Create a context from application[-profile].yaml files in a directory."""
        return cls(load_properties(directory, profile), beans=beans, profile=profile)

    def properties_with_prefix(self, prefix: str) -> List[str]:
        prefix = prefix.lower()
        return sorted(
            key for key in self._properties
            if key == prefix or key.startswith(prefix + ".")
        )

    def property_value(self, name: str, default: Any = None) -> Tuple[Any, bool]:
        name = name.lower()
        if name in self._properties:
            return self._properties[name], True
        return default, False

    def find_bean(self, selector: Any) -> Tuple[Any, bool]:
        if isinstance(selector, str):
            if selector in self._beans:
                return self._beans[selector], True
            return None, False

        if isinstance(selector, type):
            found = [bean for bean in self._beans.values() if isinstance(bean, selector)]
            if len(found) == 1:
                return found[0], True

        return None, False

    def active_profile(self) -> str:
        return self._profile

    def __repr__(self) -> str:
        return (
            f"StaticContext(properties={len(self._properties)}, "
            f"beans={sorted(self._beans)}, profile={self._profile!r})"
        )
