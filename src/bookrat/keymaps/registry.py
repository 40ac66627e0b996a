"""Keymap registry resolving key tokens to navigation events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from bookrat.runtime.telemetry import span

from .models import GLOBAL_SCOPE, Binding, normalize_token


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    binding_count: int
    scopes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """Raised when a new binding claims a key already taken in an overlapping scope."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Binding '{binding.id}' conflicts with {[b.id for b in conflicts_tuple]}"
        )
        super().__init__(message)
        self.binding = binding
        self.conflicts = conflicts_tuple


class KeymapRegistry:
    """Owns bindings per scope; the global scope applies under every focus."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._bindings: Dict[str, Binding] = {}
        self._scope_index: Dict[str, Dict[str, str]] = {}
        self._logger_name = logger_name

    def get_binding(self, binding_id: str) -> Binding:
        try:
            return self._bindings[binding_id]
        except KeyError as exc:
            raise KeyError(f"Binding '{binding_id}' is not registered") from exc

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "scope": binding.scope},
        ) as handle:
            conflicts = self.detect_conflicts(binding)
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(conflict.id for conflict in conflicts)
                )
                raise KeymapConflictError(binding, conflicts)
            if binding.id in self._bindings and not replace:
                raise ValueError(f"Binding id '{binding.id}' already registered")

            for stale in [*conflicts, self._bindings.get(binding.id)]:
                if stale is not None:
                    self._remove(stale)
            self._bindings[binding.id] = binding
            self._scope_index.setdefault(binding.scope, {})[binding.key] = binding.id
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is not None:
            self._remove(binding)
        return binding

    def detect_conflicts(self, binding: Binding) -> List[Binding]:
        if binding.scope == GLOBAL_SCOPE:
            scopes = list(self._scope_index)
        else:
            scopes = [binding.scope, GLOBAL_SCOPE]
        conflicts = []
        for scope in scopes:
            match_id = self._scope_index.get(scope, {}).get(binding.key)
            if match_id is not None and match_id != binding.id:
                conflicts.append(self._bindings[match_id])
        return conflicts

    def resolve(self, scope: str, token: str) -> Optional[Binding]:
        """Return the binding for ``token`` under ``scope``, falling back to global."""

        key = normalize_token(token)
        for candidate in (scope, GLOBAL_SCOPE):
            binding_id = self._scope_index.get(candidate, {}).get(key)
            if binding_id is not None:
                return self._bindings[binding_id]
        return None

    def iter_bindings(self, scope: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if scope is None or binding.scope == scope:
                yield binding

    def help_text(self, scope: str) -> str:
        """Render ``key/key: Label`` groups for ``scope`` followed by global keys."""

        groups: Dict[str, List[str]] = {}
        for candidate in (scope, GLOBAL_SCOPE):
            for binding in self.iter_bindings(candidate):
                if binding.show_in_help and binding.label:
                    groups.setdefault(binding.label, []).append(binding.key_label)
        return " | ".join(f"{'/'.join(keys)}: {label}" for label, keys in groups.items())

    def stats(self) -> RegistryStats:
        return RegistryStats(
            binding_count=len(self._bindings),
            scopes=tuple(sorted(self._scope_index)),
        )

    def _remove(self, binding: Binding) -> None:
        self._bindings.pop(binding.id, None)
        bucket = self._scope_index.get(binding.scope)
        if bucket and bucket.get(binding.key) == binding.id:
            del bucket[binding.key]
            if not bucket:
                del self._scope_index[binding.scope]


__all__ = ["KeymapConflictError", "KeymapRegistry", "RegistryStats"]
