"""Behavior id resolution and ZMK binding formatting.

Behavior ids are assigned per device, so an id is resolved through a chain:
the device's registry first (by id, then by its display name), then the
static fallback table. A registry hit whose display name is not recognized
stops the chain; the device has claimed the id for something this codec
cannot render.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final

from keyport.models.keymap import BehaviorRegistryEntry, Binding
from keyport.protocols.behavior_protocols import BehaviorResolverProtocol


logger = logging.getLogger(__name__)

KeyNameFn = Callable[[int], str | None]


class ParamKind(str, Enum):
    """How a numeric parameter is rendered."""

    KEY = "key"
    LAYER = "layer"
    NUMBER = "number"


class BehaviorKind(str, Enum):
    """Closed set of behaviors this codec understands."""

    TRANS = "trans"
    KP = "kp"
    MT = "mt"
    LT = "lt"
    MO = "mo"
    TOG = "tog"
    BT = "bt"
    NONE = "none"
    STUDIO_UNLOCK = "studio_unlock"
    UNKNOWN = "unknown"

    @classmethod
    def from_tag(cls, tag: str) -> "BehaviorKind":
        """Map a source tag (without ``&``) to a kind; unrecognized -> UNKNOWN."""
        try:
            kind = cls(tag)
        except ValueError:
            return cls.UNKNOWN
        return kind

    @property
    def param_kinds(self) -> tuple[ParamKind, ...]:
        return _PARAM_KINDS[self]

    @property
    def arity(self) -> int:
        """Number of parameters emitted by the generator."""
        if self is BehaviorKind.UNKNOWN:
            return 1
        return len(self.param_kinds)

    @property
    def max_tokens(self) -> int:
        """Upper bound of parameter tokens consumed by the parser.

        ``bt`` takes either a bare command or a command plus an index.
        """
        if self is BehaviorKind.BT:
            return 2
        return self.arity

    @property
    def is_layer_behavior(self) -> bool:
        return ParamKind.LAYER in self.param_kinds


_PARAM_KINDS: Final[Mapping[BehaviorKind, tuple[ParamKind, ...]]] = MappingProxyType(
    {
        BehaviorKind.TRANS: (),
        BehaviorKind.NONE: (),
        BehaviorKind.STUDIO_UNLOCK: (),
        BehaviorKind.KP: (ParamKind.KEY,),
        BehaviorKind.MO: (ParamKind.LAYER,),
        BehaviorKind.TOG: (ParamKind.LAYER,),
        BehaviorKind.BT: (ParamKind.NUMBER,),
        BehaviorKind.MT: (ParamKind.KEY, ParamKind.KEY),
        BehaviorKind.LT: (ParamKind.LAYER, ParamKind.KEY),
        BehaviorKind.UNKNOWN: (),
    }
)


@dataclass(frozen=True)
class BehaviorDescriptor:
    """A resolved behavior: its kind, arity and human readable name."""

    kind: BehaviorKind
    display_name: str

    @property
    def tag(self) -> str:
        return self.kind.value

    @property
    def arity(self) -> int:
        return self.kind.arity


# Display name (lowercase) -> kind, for registry entries
DISPLAY_NAME_TO_KIND: Final[Mapping[str, BehaviorKind]] = MappingProxyType(
    {
        "key press": BehaviorKind.KP,
        "mod-tap": BehaviorKind.MT,
        "layer-tap": BehaviorKind.LT,
        "momentary layer": BehaviorKind.MO,
        "toggle layer": BehaviorKind.TOG,
        "transparent": BehaviorKind.TRANS,
        "none": BehaviorKind.NONE,
        "bluetooth": BehaviorKind.BT,
        "studio unlock": BehaviorKind.STUDIO_UNLOCK,
    }
)

# Fallback id assignment used when the device supplies no registry entry
STATIC_BEHAVIORS: Final[Mapping[int, BehaviorDescriptor]] = MappingProxyType(
    {
        0: BehaviorDescriptor(BehaviorKind.TRANS, "Transparent"),
        1: BehaviorDescriptor(BehaviorKind.KP, "Key Press"),
        2: BehaviorDescriptor(BehaviorKind.MT, "Mod-Tap"),
        3: BehaviorDescriptor(BehaviorKind.LT, "Layer-Tap"),
        4: BehaviorDescriptor(BehaviorKind.MO, "Momentary Layer"),
        5: BehaviorDescriptor(BehaviorKind.TOG, "Toggle Layer"),
        6: BehaviorDescriptor(BehaviorKind.BT, "Bluetooth"),
    }
)


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    UNRECOGNIZED_DISPLAY_NAME = "unrecognized_display_name"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class BehaviorResolution:
    """Outcome of resolving one behavior id."""

    behavior_id: int
    status: ResolutionStatus
    descriptor: BehaviorDescriptor | None = None
    registry_display_name: str | None = None
    source: str | None = None

    @property
    def is_resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


def kind_from_display_name(display_name: str) -> BehaviorKind | None:
    """Map a registry display name to a kind, case-insensitively."""
    return DISPLAY_NAME_TO_KIND.get(display_name.strip().lower())


class RegistryBehaviorResolver:
    """Resolve ids through a device-supplied registry."""

    def __init__(self, registry: Mapping[int, BehaviorRegistryEntry]) -> None:
        self.registry = registry

    def resolve(self, behavior_id: int) -> BehaviorResolution | None:
        entry = self.registry.get(behavior_id)
        if entry is None:
            return None

        kind = kind_from_display_name(entry.display_name)
        if kind is None:
            logger.debug(
                "Registry entry %d has unrecognized display name %r",
                behavior_id,
                entry.display_name,
            )
            return BehaviorResolution(
                behavior_id=behavior_id,
                status=ResolutionStatus.UNRECOGNIZED_DISPLAY_NAME,
                registry_display_name=entry.display_name,
                source="registry",
            )

        return BehaviorResolution(
            behavior_id=behavior_id,
            status=ResolutionStatus.RESOLVED,
            descriptor=BehaviorDescriptor(kind, entry.display_name),
            registry_display_name=entry.display_name,
            source="registry",
        )


class StaticBehaviorResolver:
    """Resolve ids through the static fallback table."""

    def resolve(self, behavior_id: int) -> BehaviorResolution | None:
        descriptor = STATIC_BEHAVIORS.get(behavior_id)
        if descriptor is None:
            return None
        return BehaviorResolution(
            behavior_id=behavior_id,
            status=ResolutionStatus.RESOLVED,
            descriptor=descriptor,
            source="static",
        )


def create_resolver_chain(
    registry: Mapping[int, BehaviorRegistryEntry] | None = None,
) -> list[BehaviorResolverProtocol]:
    """Build the lookup chain: registry (when non-empty) then static table."""
    chain: list[BehaviorResolverProtocol] = []
    if registry:
        chain.append(RegistryBehaviorResolver(registry))
    chain.append(StaticBehaviorResolver())
    return chain


def resolve_behavior(
    behavior_id: int,
    registry: Mapping[int, BehaviorRegistryEntry] | None = None,
) -> BehaviorResolution:
    """Resolve a behavior id against the registry, then the static table."""
    for resolver in create_resolver_chain(registry):
        resolution = resolver.resolve(behavior_id)
        if resolution is not None:
            return resolution
    return BehaviorResolution(behavior_id=behavior_id, status=ResolutionStatus.UNKNOWN)


def _key_placeholder(value: int) -> str:
    return f"/* HID 0x{value:x} */"


def _format_param(
    value: int,
    param_kind: ParamKind,
    key_name_fn: KeyNameFn,
    binding: Binding,
    warnings: list[str] | None,
) -> str:
    if param_kind is not ParamKind.KEY:
        return str(value)

    key_name = key_name_fn(value)
    if key_name is not None:
        return key_name

    if warnings is not None:
        warnings.append(
            f"Unknown key usage 0x{value:x} at position {binding.position}"
        )
    return _key_placeholder(value)


def format_binding(
    binding: Binding,
    descriptor: BehaviorDescriptor,
    key_name_fn: KeyNameFn,
    warnings: list[str] | None = None,
) -> str:
    """Render one binding in ZMK DeviceTree syntax.

    Examples: ``&trans``, ``&kp A``, ``&mt LCTRL A``, ``&lt 1 TAB``, ``&mo 2``.

    Missing parameters are rendered as placeholder comments so the binding
    count of a layer never changes.

    Args:
        binding: Binding with numeric parameters
        descriptor: Resolved behavior
        key_name_fn: Converts usage codes to key names
        warnings: Optional list that collects unresolved keys

    Returns:
        Binding text
    """
    kind = descriptor.kind
    if kind is BehaviorKind.UNKNOWN:
        return f"/* Unknown behavior {binding.behavior_id} */"

    if kind.arity == 0:
        return f"&{descriptor.tag}"

    if kind is BehaviorKind.LT:
        layer = (
            str(binding.param1)
            if binding.param1 is not None
            else "/* missing param1 */"
        )
        key = (
            _format_param(binding.param2, ParamKind.KEY, key_name_fn, binding, warnings)
            if binding.param2 is not None
            else "/* missing key */"
        )
        return f"&lt {layer} {key}"

    first_kind = kind.param_kinds[0]
    first = (
        _format_param(binding.param1, first_kind, key_name_fn, binding, warnings)
        if binding.param1 is not None
        else "/* missing param1 */"
    )
    if kind.arity == 1:
        return f"&{descriptor.tag} {first}"

    second_kind = kind.param_kinds[1]
    second = (
        _format_param(binding.param2, second_kind, key_name_fn, binding, warnings)
        if binding.param2 is not None
        else "/* missing param2 */"
    )
    return f"&{descriptor.tag} {first} {second}"


def format_binding_with_registry(
    binding: Binding,
    key_name_fn: KeyNameFn,
    registry: Mapping[int, BehaviorRegistryEntry] | None = None,
    warnings: list[str] | None = None,
) -> str:
    """Resolve a binding's behavior and render it.

    Unresolvable behaviors become comments naming the raw id (and, for a
    registry hit with an unrecognized name, the device's display name).
    """
    resolution = resolve_behavior(binding.behavior_id, registry)

    if resolution.status is ResolutionStatus.UNRECOGNIZED_DISPLAY_NAME:
        if warnings is not None:
            warnings.append(
                f"Unknown behavior: {resolution.registry_display_name} "
                f"(id={binding.behavior_id}) at position {binding.position}"
            )
        return (
            f"/* Unknown behavior: {resolution.registry_display_name} "
            f"(id={binding.behavior_id}) */"
        )

    if resolution.descriptor is None:
        if warnings is not None:
            warnings.append(
                f"Unknown behavior {binding.behavior_id} at position {binding.position}"
            )
        return f"/* Unknown behavior {binding.behavior_id} */"

    return format_binding(binding, resolution.descriptor, key_name_fn, warnings)


def behavior_tag(behavior_id: int) -> str | None:
    """Static-table tag for an id, e.g. ``kp`` for 1."""
    descriptor = STATIC_BEHAVIORS.get(behavior_id)
    return descriptor.tag if descriptor else None


def param_count(behavior_id: int) -> int:
    descriptor = STATIC_BEHAVIORS.get(behavior_id)
    return descriptor.arity if descriptor else 0


def is_layer_behavior(behavior_id: int) -> bool:
    descriptor = STATIC_BEHAVIORS.get(behavior_id)
    return descriptor is not None and descriptor.kind.is_layer_behavior


def all_behaviors() -> dict[int, BehaviorDescriptor]:
    """Copy of the static fallback table."""
    return dict(STATIC_BEHAVIORS)


__all__ = [
    "ParamKind",
    "BehaviorKind",
    "BehaviorDescriptor",
    "BehaviorResolution",
    "ResolutionStatus",
    "DISPLAY_NAME_TO_KIND",
    "STATIC_BEHAVIORS",
    "RegistryBehaviorResolver",
    "StaticBehaviorResolver",
    "create_resolver_chain",
    "resolve_behavior",
    "kind_from_display_name",
    "format_binding",
    "format_binding_with_registry",
    "behavior_tag",
    "param_count",
    "is_layer_behavior",
    "all_behaviors",
]
