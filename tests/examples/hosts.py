"""Examples of host objects.

This module defines application objects of every shape the emitter
flattens into mappings:
- a dataclass,
- a pydantic model,
- a slotted class,
- a plain class with instance attributes and properties,
- a plain class with a property that fails to read.

These objects are intended for test purposes only.
"""

from dataclasses import dataclass, field

from pydantic import BaseModel


@dataclass
class Point:
    """Dataclass with two coordinates."""

    x: int
    y: int


@dataclass
class Polygon:
    """Dataclass nesting other dataclasses."""

    name: str
    points: list[Point] = field(default_factory=list)


class Server(BaseModel):
    """Pydantic model with a nested collection."""

    host: str
    port: int = 8080
    tags: list[str] = []


class Slotted:
    """Class storing members in slots only."""

    __slots__ = ('left', 'right', '_hidden')

    def __init__(self, left: int, right: int) -> None:
        self.left = left
        self.right = right
        self._hidden = 'secret'


class Account:
    """Plain class exposing attributes and a computed property."""

    def __init__(self, owner: str, balance: int) -> None:
        self.owner = owner
        self.balance = balance
        self._ledger = []

    @property
    def overdrawn(self) -> bool:
        return self.balance < 0


class Faulty:
    """Plain class with a property raising on access."""

    def __init__(self) -> None:
        self.name = 'faulty'

    @property
    def broken(self) -> str:
        raise RuntimeError('member is unavailable')
