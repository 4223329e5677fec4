from .state_machine import (
    ActorRole,
    HandoverAction,
    HandoverStateMachine,
    HandoverStatus,
    HandoverType,
    Transition,
)

__all__ = [
    "ActorRole",
    "HandoverAction",
    "HandoverStateMachine",
    "HandoverStatus",
    "HandoverType",
    "Transition",
]
