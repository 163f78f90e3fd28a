"""
Challenge-Type Registry.

Maps every drawable challenge kind to a weight and a generator function.
The chooser expands the weights into a flat list and draws uniformly from
it, so adding a kind only means registering it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from gamekins.challenges.base import Challenge
from gamekins.models.base import HOST_ONLY_KINDS, ChallengeKind
from gamekins.models.generation import ChallengeGenerationData

if TYPE_CHECKING:
    from gamekins.config.models import ChallengeWeightsConfig


# Type alias for generator functions; None means "nothing to build here"
ChallengeGenerator = Callable[[ChallengeGenerationData], Optional[Challenge]]


class RegistryConfigurationError(Exception):
    """Raised when the registry cannot produce a challenge kind."""

    pass


@dataclass(frozen=True)
class RegisteredType:
    """A registered challenge kind."""

    kind: ChallengeKind
    weight: int
    generator: ChallengeGenerator


class ChallengeTypeRegistry:
    """Registry of drawable challenge kinds.

    Usage:
        registry = ChallengeTypeRegistry()
        registry.register(ChallengeKind.LINE_COVERAGE, 4, generate_line_coverage)

        kind = registry.choose(rng)
        challenge = registry.get_generator(kind)(data)
    """

    def __init__(self) -> None:
        self._types: dict[ChallengeKind, RegisteredType] = {}

    def register(
        self,
        kind: ChallengeKind,
        weight: int,
        generator: ChallengeGenerator,
    ) -> None:
        """Register or replace a challenge kind.

        Args:
            kind: Kind produced by the generator
            weight: Relative draw weight, 0 keeps the kind disabled
            generator: Function building the challenge

        Raises:
            ValueError: If the kind is host-only or the weight is negative
        """
        if kind in HOST_ONLY_KINDS:
            raise ValueError(f"{kind.value} challenges are never drawn and cannot be registered")
        if weight < 0:
            raise ValueError(f"Weight of {kind.value} must not be negative, got {weight}")
        self._types[kind] = RegisteredType(kind=kind, weight=weight, generator=generator)

    def unregister(self, kind: ChallengeKind) -> bool:
        """Unregister a challenge kind.

        Returns:
            True if was registered, False otherwise
        """
        return self._types.pop(kind, None) is not None

    def get_generator(self, kind: ChallengeKind) -> ChallengeGenerator:
        """Get the generator of a kind.

        Raises:
            KeyError: If the kind is not registered
        """
        if kind not in self._types:
            raise KeyError(f"Challenge kind not registered: {kind}")
        return self._types[kind].generator

    def is_registered(self, kind: ChallengeKind) -> bool:
        return kind in self._types

    def list_registered(self) -> list[ChallengeKind]:
        return list(self._types.keys())

    def weights(self) -> dict[ChallengeKind, int]:
        return {kind: entry.weight for kind, entry in self._types.items()}

    @property
    def total_weight(self) -> int:
        return sum(entry.weight for entry in self._types.values())

    def choose(self, rng: random.Random) -> ChallengeKind:
        """Draw a kind, each one as often as its weight.

        Args:
            rng: Random source of the round

        Returns:
            The drawn kind

        Raises:
            RegistryConfigurationError: If no kind has a positive weight
        """
        weight_list = [
            entry.kind for entry in self._types.values() for _ in range(entry.weight)
        ]
        if not weight_list:
            raise RegistryConfigurationError("No challenge kind has a positive weight")
        return weight_list[rng.randrange(len(weight_list))]


def create_default_registry(
    weights: Optional["ChallengeWeightsConfig"] = None,
) -> ChallengeTypeRegistry:
    """Create a registry with the built-in generators.

    Args:
        weights: Draw weights per kind, defaults to ChallengeWeightsConfig()

    Returns:
        Registry with every drawable kind registered
    """
    from gamekins.config.models import ChallengeWeightsConfig
    from gamekins.generation.generators import DEFAULT_GENERATORS

    weights = weights or ChallengeWeightsConfig()
    registry = ChallengeTypeRegistry()
    for kind, weight in weights.as_mapping().items():
        registry.register(kind, weight, DEFAULT_GENERATORS[kind])
    return registry
