"""Configuration for the repository list store.

Usage
-----
Create a configuration with defaults:

>>> config = StoreConfig()
>>> config.notice_ttl_s
5.0

Or load from environment variables:

>>> import os
>>> os.environ["STARWATCH_MUTATION_POLICY"] = "optimistic"
>>> StoreConfig.from_env().mutation_policy
<MutationPolicy.OPTIMISTIC: 'optimistic'>

"""

from __future__ import annotations

import dataclasses as dc
import math
import os

from starwatch.store.models import MutationPolicy

_DEFAULT_NOTICE_TTL_S = 5.0


@dc.dataclass(frozen=True, slots=True)
class StoreConfig:
    """Behaviour switches for ``RepoListStore``.

    Attributes
    ----------
    notice_ttl_s
        Seconds an error notice stays visible before it is dismissed.
    mutation_policy
        Whether mutations wait for backend confirmation or apply
        optimistically and roll back.

    """

    notice_ttl_s: float = _DEFAULT_NOTICE_TTL_S
    mutation_policy: MutationPolicy = MutationPolicy.CONFIRM

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ValueError(msg) from exc
        if not math.isfinite(value) or value <= 0:
            msg = f"{env_var} must be positive and finite, got: {value}"
            raise ValueError(msg)
        return value

    @staticmethod
    def _parse_policy(env_var: str) -> MutationPolicy:
        raw = os.environ.get(env_var, "")
        if not raw.strip():
            return MutationPolicy.CONFIRM
        try:
            return MutationPolicy(raw.strip().lower())
        except ValueError as exc:
            valid = ", ".join(policy.value for policy in MutationPolicy)
            msg = f"{env_var} must be one of {valid}, got: {raw!r}"
            raise ValueError(msg) from exc

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Create configuration from environment variables.

        Reads ``STARWATCH_NOTICE_TTL_S`` (positive number) and
        ``STARWATCH_MUTATION_POLICY`` (``confirm`` or ``optimistic``).

        Raises
        ------
        ValueError
            If either variable holds an invalid value.

        """
        return cls(
            notice_ttl_s=cls._parse_positive_float(
                "STARWATCH_NOTICE_TTL_S", _DEFAULT_NOTICE_TTL_S
            ),
            mutation_policy=cls._parse_policy("STARWATCH_MUTATION_POLICY"),
        )
