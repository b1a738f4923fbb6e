from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..core.enums import PairingPolicy
from ..core.exceptions import ValidationError
from .strategies.base import PairingStrategy
from .strategies.single_slot_strategy import SingleSlotPairingStrategy
from .strategies.stack_strategy import StackPairingStrategy


@dataclass
class PairingStrategyFactory:
    """Factory Pattern: choose the pairing strategy from configuration."""

    def for_policy(self, policy: Union[PairingPolicy, str, None]) -> PairingStrategy:
        if policy is None:
            return SingleSlotPairingStrategy()
        try:
            policy = PairingPolicy(policy)
        except ValueError:
            raise ValidationError(f"unknown pairing policy: {policy}")
        if policy == PairingPolicy.STACK:
            return StackPairingStrategy()
        return SingleSlotPairingStrategy()
