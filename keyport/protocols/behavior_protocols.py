"""Protocol definitions for behavior-related interfaces."""

from typing import TYPE_CHECKING, Protocol, runtime_checkable


if TYPE_CHECKING:
    from keyport.codec.behavior import BehaviorResolution


@runtime_checkable
class BehaviorResolverProtocol(Protocol):
    """One stage of the behavior id lookup chain."""

    def resolve(self, behavior_id: int) -> "BehaviorResolution | None":
        """Resolve a behavior id.

        Returns:
            A resolution when this stage knows the id, None to let the next
            stage try
        """
        ...
