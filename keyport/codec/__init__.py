"""Codecs between numeric binding data and ZMK source symbols."""

from keyport.codec.behavior import (
    STATIC_BEHAVIORS,
    BehaviorDescriptor,
    BehaviorKind,
    BehaviorResolution,
    RegistryBehaviorResolver,
    ResolutionStatus,
    StaticBehaviorResolver,
    format_binding,
    format_binding_with_registry,
    resolve_behavior,
)
from keyport.codec.reverse import (
    behavior_id_from_tag,
    binding_from_parsed,
    usage_from_key_expression,
    usage_from_key_name,
)
from keyport.codec.usage import (
    key_code,
    key_name_from_usage,
    key_name_with_modifiers,
    make_usage,
)


__all__ = [
    "STATIC_BEHAVIORS",
    "BehaviorDescriptor",
    "BehaviorKind",
    "BehaviorResolution",
    "RegistryBehaviorResolver",
    "ResolutionStatus",
    "StaticBehaviorResolver",
    "format_binding",
    "format_binding_with_registry",
    "resolve_behavior",
    "behavior_id_from_tag",
    "binding_from_parsed",
    "usage_from_key_expression",
    "usage_from_key_name",
    "key_code",
    "key_name_from_usage",
    "key_name_with_modifiers",
    "make_usage",
]
