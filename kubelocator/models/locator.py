"""Locator document data structures.

An ObjectLocator names a start object (by label selector or name template),
an ordered path of edge names, and the catalog of edge declarations that the
path draws from.  All values are immutable and parsed from the camelCase JSON
shape used in workflow definitions.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from kubelocator.errors import InvalidLocatorError


def _require_mapping(value: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidLocatorError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _require_str_list(value: Any, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidLocatorError(f"{where} must be a list of strings")
    return tuple(value)


def object_key(obj: Mapping[str, Any]) -> str:
    """Return the ``namespace/name`` key of an object (``name`` when cluster-scoped)."""
    metadata = obj.get("metadata") or {}
    namespace = str(metadata.get("namespace") or "")
    name = str(metadata.get("name") or "")
    return f"{namespace}/{name}" if namespace else name


@dataclass(frozen=True)
class TypeDescriptor:
    """An (apiVersion, kind) pair identifying a resource kind."""

    api_version: str
    kind: str

    @property
    def group(self) -> str:
        return self.api_version.rpartition("/")[0]

    @property
    def version(self) -> str:
        return self.api_version.rpartition("/")[2]

    def __str__(self) -> str:
        return f"{self.api_version}, Kind={self.kind}"

    @classmethod
    def from_dict(cls, data: Any, where: str = "target") -> TypeDescriptor:
        data = _require_mapping(data, where)
        api_version = str(data.get("apiVersion") or "").strip()
        kind = str(data.get("kind") or "").strip()
        if not api_version or not kind:
            raise InvalidLocatorError(f"{where} needs both apiVersion and kind")
        return cls(api_version=api_version, kind=kind)

    def to_dict(self) -> dict[str, str]:
        return {"apiVersion": self.api_version, "kind": self.kind}


@dataclass(frozen=True)
class ResourceHandle:
    """Queryable identity of a kind: group, version and plural resource name."""

    group: str
    version: str
    resource: str
    kind: str
    namespaced: bool = True

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def group_resource(self) -> str:
        return f"{self.resource}.{self.group}" if self.group else self.resource

    @property
    def type_descriptor(self) -> TypeDescriptor:
        return TypeDescriptor(api_version=self.api_version, kind=self.kind)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


class SelectorOperator(StrEnum):
    """Operators allowed in a label selector requirement."""

    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass(frozen=True)
class SelectorRequirement:
    """A single matchExpressions entry."""

    key: str
    operator: SelectorOperator
    values: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> SelectorRequirement:
        data = _require_mapping(data, "selector.matchExpressions[]")
        key = str(data.get("key") or "")
        if not key:
            raise InvalidLocatorError("selector requirement needs a key")
        try:
            operator = SelectorOperator(data.get("operator"))
        except ValueError as exc:
            raise InvalidLocatorError(f"{data.get('operator')!r} is not a valid label selector operator") from exc
        values = _require_str_list(data.get("values"), f"selector requirement {key!r} values")
        if operator in (SelectorOperator.IN, SelectorOperator.NOT_IN) and not values:
            raise InvalidLocatorError(f"selector requirement {key!r} with operator {operator} needs values")
        if operator in (SelectorOperator.EXISTS, SelectorOperator.DOES_NOT_EXIST) and values:
            raise InvalidLocatorError(f"selector requirement {key!r} with operator {operator} takes no values")
        return cls(key=key, operator=operator, values=values)


@dataclass(frozen=True)
class LabelSelector:
    """Kubernetes-style label selector (matchLabels plus matchExpressions).

    An empty selector matches every object.
    """

    match_labels: tuple[tuple[str, str], ...] = ()
    match_expressions: tuple[SelectorRequirement, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.match_labels and not self.match_expressions

    @classmethod
    def from_dict(cls, data: Any) -> LabelSelector:
        data = _require_mapping(data, "selector")
        labels = _require_mapping(data.get("matchLabels") or {}, "selector.matchLabels")
        expressions = data.get("matchExpressions") or []
        if not isinstance(expressions, list):
            raise InvalidLocatorError("selector.matchExpressions must be a list")
        return cls(
            match_labels=tuple(sorted((str(k), str(v)) for k, v in labels.items())),
            match_expressions=tuple(SelectorRequirement.from_dict(e) for e in expressions),
        )

    @classmethod
    def from_labels(cls, labels: Mapping[str, str]) -> LabelSelector:
        return cls(match_labels=tuple(sorted((str(k), str(v)) for k, v in labels.items())))

    def to_selector_string(self) -> str:
        """Render as a Kubernetes label selector string, sorted by key."""
        parts: list[tuple[str, str]] = [(key, f"{key}={value}") for key, value in self.match_labels]
        for req in self.match_expressions:
            values = ",".join(sorted(req.values))
            if req.operator == SelectorOperator.IN:
                parts.append((req.key, f"{req.key} in ({values})"))
            elif req.operator == SelectorOperator.NOT_IN:
                parts.append((req.key, f"{req.key} notin ({values})"))
            elif req.operator == SelectorOperator.EXISTS:
                parts.append((req.key, req.key))
            else:
                parts.append((req.key, f"!{req.key}"))
        return ",".join(text for _, text in sorted(parts))

    def matches(self, labels: Mapping[str, str] | None) -> bool:
        labels = labels or {}
        for key, value in self.match_labels:
            if labels.get(key) != value:
                return False
        for req in self.match_expressions:
            present = req.key in labels
            if req.operator == SelectorOperator.IN and not (present and labels[req.key] in req.values):
                return False
            if req.operator == SelectorOperator.NOT_IN and present and labels[req.key] in req.values:
                return False
            if req.operator == SelectorOperator.EXISTS and not present:
                return False
            if req.operator == SelectorOperator.DOES_NOT_EXIST and present:
                return False
        return True


class ConnectionType(StrEnum):
    """How two kinds of an edge declaration reference each other."""

    OWNED_BY = "OwnedBy"
    MATCH_NAME = "MatchName"
    MATCH_SELECTOR = "MatchSelector"
    MATCH_REF = "MatchRef"


@dataclass(frozen=True)
class ConnectionSpec:
    """Relationship semantics of an edge, always stated from src to dst."""

    type: ConnectionType
    selector_path: str = "spec.selector"
    references: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Any, edge: str) -> ConnectionSpec:
        data = _require_mapping(data, f"connection of edge {edge!r}")
        try:
            conn_type = ConnectionType(data.get("type"))
        except ValueError as exc:
            raise InvalidLocatorError(f"edge {edge!r} has unknown connection type {data.get('type')!r}") from exc
        references = _require_str_list(data.get("references"), f"references of edge {edge!r}")
        if conn_type == ConnectionType.MATCH_REF and not references:
            raise InvalidLocatorError(f"edge {edge!r} of type MatchRef needs at least one reference path")
        return cls(
            type=conn_type,
            selector_path=str(data.get("selectorPath") or "spec.selector"),
            references=references,
        )


@dataclass(frozen=True)
class EdgeDeclaration:
    """Undirected, kind-level relationship between two distinct kinds."""

    name: str
    src: TypeDescriptor
    dst: TypeDescriptor
    connection: ConnectionSpec

    def __post_init__(self) -> None:
        if not self.name:
            raise InvalidLocatorError("edge declaration needs a name")
        if self.src == self.dst:
            raise InvalidLocatorError(f"edge {self.name!r} must relate two distinct kinds, got {self.src} twice")

    @classmethod
    def from_dict(cls, data: Any) -> EdgeDeclaration:
        data = _require_mapping(data, "connections[]")
        name = str(data.get("name") or "").strip()
        return cls(
            name=name,
            src=TypeDescriptor.from_dict(data.get("src"), f"src of edge {name!r}"),
            dst=TypeDescriptor.from_dict(data.get("dst"), f"dst of edge {name!r}"),
            connection=ConnectionSpec.from_dict(data.get("connection") or {}, name),
        )


@dataclass(frozen=True)
class RootSelection:
    """How to find the start object.  The namespace comes from the caller."""

    target: TypeDescriptor
    selector: LabelSelector | None = None
    name_template: str = ""

    @property
    def uses_selector(self) -> bool:
        """True when a non-empty selector is present; otherwise the name template is used."""
        return self.selector is not None and not self.selector.is_empty

    @classmethod
    def from_dict(cls, data: Any) -> RootSelection:
        data = _require_mapping(data, "start")
        selector_data = data.get("selector")
        root = cls(
            target=TypeDescriptor.from_dict(data.get("target"), "start.target"),
            selector=LabelSelector.from_dict(selector_data) if selector_data is not None else None,
            name_template=str(data.get("nameTemplate") or ""),
        )
        if not root.uses_selector and not root.name_template:
            raise InvalidLocatorError("start needs a non-empty selector or a nameTemplate")
        return root


@dataclass(frozen=True)
class ObjectLocator:
    """A complete locator document: start selection, path and edge catalog."""

    start: RootSelection
    path: tuple[str, ...] = ()
    connections: tuple[EdgeDeclaration, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Any) -> ObjectLocator:
        data = _require_mapping(data, "locator")
        connections = data.get("connections") or []
        if not isinstance(connections, list):
            raise InvalidLocatorError("connections must be a list")
        return cls(
            start=RootSelection.from_dict(data.get("start")),
            path=_require_str_list(data.get("path"), "path"),
            connections=tuple(EdgeDeclaration.from_dict(c) for c in connections),
        )
