"""Small 3D vector and axis-aligned box types used to track voxel extents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

Number = Union[int, float]


@dataclass(frozen=True)
class Vec3:
    """An immutable three-component vector of floats."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def splat(cls, value: Number) -> "Vec3":
        """Build a vector with every component set to ``value``."""
        return cls(value, value, value)

    def _combine(self, other: Union["Vec3", Number], op) -> "Vec3":
        if isinstance(other, Vec3):
            return Vec3(op(self.x, other.x), op(self.y, other.y), op(self.z, other.z))
        if isinstance(other, (int, float)):
            return Vec3(op(self.x, other), op(self.y, other), op(self.z, other))
        return NotImplemented

    def __add__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._combine(other, lambda a, b: a + b)

    def __sub__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._combine(other, lambda a, b: a - b)

    def __mul__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._combine(other, lambda a, b: a * b)

    def __truediv__(self, other: Union["Vec3", Number]) -> "Vec3":
        return self._combine(other, lambda a, b: a / b)

    def __rtruediv__(self, other: Number) -> "Vec3":
        if isinstance(other, (int, float)):
            return Vec3(other / self.x, other / self.y, other / self.z)
        return NotImplemented

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z


@dataclass
class Box:
    """An axis-aligned bounding box given by its lower and upper corners."""

    lower: Vec3 = field(default_factory=Vec3)
    upper: Vec3 = field(default_factory=Vec3)

    @classmethod
    def empty(cls) -> "Box":
        """A box inverted far enough that any combined point becomes its extent."""
        return cls(Vec3.splat(1e7), Vec3.splat(-1e7))

    def center(self) -> Vec3:
        """Centre point of the box."""
        return (self.lower + self.upper) * 0.5

    def extents(self) -> Vec3:
        """Half-widths of the box."""
        return (self.upper - self.lower) * 0.5

    def perimeter(self) -> float:
        """Twice the sum of the edge lengths along each axis."""
        w = self.upper - self.lower
        return 2.0 * (w.x + w.y + w.z)

    def combine(self, point: Vec3) -> None:
        """Grow the box so that it includes ``point``."""
        self.lower = Vec3(
            min(self.lower.x, point.x),
            min(self.lower.y, point.y),
            min(self.lower.z, point.z),
        )
        self.upper = Vec3(
            max(self.upper.x, point.x),
            max(self.upper.y, point.y),
            max(self.upper.z, point.z),
        )

    def contains_point(self, point: Vec3) -> bool:
        """Whether ``point`` lies inside the box, borders included."""
        return all(lo <= p <= hi for lo, p, hi in zip(self.lower, point, self.upper))

    def intersects(self, other: "Box") -> bool:
        """Permissive overlap test: the checks are OR-ed onto an initial true result.

        As a consequence it never rules an intersection out.
        """
        result = True
        for lo, other_lo in zip(self.lower, other.lower):
            result = result or lo <= other_lo
        for other_hi, hi in zip(other.upper, self.upper):
            result = result or other_hi <= hi
        return result

    def size(self) -> Vec3:
        """Edge lengths of the box along each axis."""
        return self.upper - self.lower

    def __add__(self, other: Union["Box", Number]) -> "Box":
        if isinstance(other, Box):
            return Box(self.lower + other.lower, self.upper + other.upper)
        return Box(self.lower + other, self.upper + other)

    def __sub__(self, other: Union["Box", Number]) -> "Box":
        if isinstance(other, Box):
            return Box(self.lower - other.lower, self.upper - other.upper)
        return Box(self.lower - other, self.upper - other)

    def __mul__(self, other: Union["Box", Number]) -> "Box":
        if isinstance(other, Box):
            return Box(self.lower * other.lower, self.upper * other.upper)
        return Box(self.lower * other, self.upper * other)

    def __truediv__(self, other: Union["Box", Number]) -> "Box":
        if isinstance(other, Box):
            return Box(self.lower / other.lower, self.upper / other.upper)
        return Box(self.lower / other, self.upper / other)