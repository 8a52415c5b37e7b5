from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ghent.core.entities import Scope
from ghent.core.exceptions import ScopeError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ghent.core.settings import ScopeSettings

logger = logging.getLogger(__name__)


def parse_scope_string(scope: str | None) -> list[str]:
    if not scope:
        return []
    return scope.split()


class ScopeValidator:
    """Resolves requested scope names against a fixed catalog.

    The catalog and default set are read-only after construction, so a single
    validator can serve concurrent requests.
    """

    def __init__(
        self,
        catalog: Mapping[str, Scope],
        default: Iterable[str] = (),
        *,
        required: bool = False,
    ) -> None:
        self.catalog = dict(catalog)
        self.required = required
        self.default: list[Scope] = []
        for name in default:
            scope = self.catalog.get(name)
            if scope is None:
                msg = f"default scope is not in the catalog: {name}"
                raise ValueError(msg)
            self.default.append(scope)

    @classmethod
    def from_settings(cls, settings: ScopeSettings) -> ScopeValidator:
        catalog = {name: Scope(name=name, description=description) for name, description in settings.catalog.items()}
        return cls(catalog, settings.default, required=settings.required)

    def validate(
        self,
        requested: Iterable[str] | str | None,
        original: Iterable[Scope] | None = None,
    ) -> list[Scope]:
        names = parse_scope_string(requested) if requested is None or isinstance(requested, str) else list(requested)
        granted = list(original) if original is not None else None

        if not names:
            if self.required:
                raise ScopeError(400, "missing scope")
            if granted is not None:
                return granted
            return list(self.default)

        granted_names = {scope.name for scope in granted} if granted is not None else None
        resolved: dict[str, Scope] = {}
        for name in names:
            if name in resolved:
                continue
            scope = self._lookup(name)
            if granted_names is not None and name not in granted_names:
                logger.debug("Rejected scope %s outside the original grant", name)
                raise ScopeError(400, f"scope was not originally granted: {name}")
            resolved[name] = scope
        return list(resolved.values())

    def _lookup(self, name: str) -> Scope:
        scope = self.catalog.get(name)
        if scope is None:
            logger.debug("Rejected unknown scope %s", name)
            raise ScopeError(400, f"invalid scope: {name}")
        return scope
