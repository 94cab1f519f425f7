"""Explicit caller identity passed into every core operation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation.

    Identity and role are asserted by the authorization layer in front of
    the core; the core records them but does not verify them.
    """

    id: int
    role: str
    name: str | None = None
