from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: int) -> "Point":
        return Point(self.x * scalar, self.y * scalar)

    def __neg__(self) -> "Point":
        return Point(-self.x, -self.y)

    def as_list(self) -> list[int]:
        return [self.x, self.y]


class Facing:
    """The eight unit directions an agent can face. Screen axes: y grows south."""

    NORTH = Point(0, -1)
    NORTH_EAST = Point(1, -1)
    EAST = Point(1, 0)
    SOUTH_EAST = Point(1, 1)
    SOUTH = Point(0, 1)
    SOUTH_WEST = Point(-1, 1)
    WEST = Point(-1, 0)
    NORTH_WEST = Point(-1, -1)

    DIRECTIONS: tuple[Point, ...] = (
        NORTH,
        NORTH_EAST,
        EAST,
        SOUTH_EAST,
        SOUTH,
        SOUTH_WEST,
        WEST,
        NORTH_WEST,
    )

    @staticmethod
    def opposite(direction: Point) -> Point:
        return -direction

    @staticmethod
    def is_direction(vector: Point) -> bool:
        return vector in Facing.DIRECTIONS
