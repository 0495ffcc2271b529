"""Datasignals data models — group names, signals, payload values."""

from datasignals.models.delivery import DeliveryFailure, DeliveryReport
from datasignals.models.groups import GroupKey, GroupName, ScopeKind
from datasignals.models.signals import (
    DEFAULT_SIGNAL,
    MAX_SIGNAL_LENGTH,
    Actor,
    ActorKind,
    Angle,
    TargetKind,
    ValueKind,
    Vector,
    is_listenable_signal,
    is_valid_signal,
    target_kind,
    value_kind,
)

__all__ = [
    # delivery
    "DeliveryFailure",
    "DeliveryReport",
    # groups
    "ScopeKind",
    "GroupName",
    "GroupKey",
    # signals
    "DEFAULT_SIGNAL",
    "MAX_SIGNAL_LENGTH",
    "is_valid_signal",
    "is_listenable_signal",
    # actors
    "Actor",
    "ActorKind",
    # values
    "Angle",
    "Vector",
    "ValueKind",
    "value_kind",
    # targets
    "TargetKind",
    "target_kind",
]
