"""Per-entity geometry post-processing, such as normal smoothing across brush faces."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Callable, Optional, Sequence

from .util import Vec3

_log = logging.getLogger(__name__)

DEFAULT_NORMAL_SMOOTH_THRESHOLD = math.pi / 4


@dataclass
class MeshData:
    """Vertex positions and normals of one mesh; ``normals`` is edited in place."""

    positions: Optional[list[Vec3]] = None
    normals: Optional[list[Vec3]] = None
    name: str = ""


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _position_key(position: Vec3) -> tuple[float, float, float]:
    return tuple(_round_half_away(v * 10000.0) / 10000.0 for v in position)


def _find(parents: list[int], index: int) -> int:
    while parents[index] != index:
        parents[index] = parents[parents[index]]
        index = parents[index]
    return index


def smooth_normals(meshes: Sequence[MeshData], normal_smooth_threshold: float) -> None:
    """Average normals of coincident vertices whose angle is below the threshold (radians)."""
    if normal_smooth_threshold <= 0.0:
        return

    vertex_map: dict[tuple[float, float, float], list[tuple[list[Vec3], int]]] = {}
    for mesh in meshes:
        if mesh.positions is None:
            _log.error("[mesh %r] Tried to smooth by angle, but the mesh has no positions!", mesh.name)
            return
        if mesh.normals is None:
            _log.error("[mesh %r] Tried to smooth by angle, but the mesh has no normals!", mesh.name)
            return
        if len(mesh.normals) != len(mesh.positions):
            _log.error(
                "[mesh %r] Tried to smooth by angle, but normal count doesn't match position count! (%d and %d)",
                mesh.name,
                len(mesh.normals),
                len(mesh.positions),
            )
            return
        for index, position in enumerate(mesh.positions):
            vertex_map.setdefault(_position_key(position), []).append((mesh.normals, index))

    for slots in vertex_map.values():
        count = len(slots)
        if count <= 1:
            continue

        normals = [store[index] for store, index in slots]
        parents = list(range(count))
        for (a_i, a), (b_i, b) in combinations(enumerate(normals), 2):
            if a.angle_between(b) < normal_smooth_threshold:
                root_a, root_b = _find(parents, a_i), _find(parents, b_i)
                if root_a != root_b:
                    parents[root_b] = root_a

        groups: dict[int, list[int]] = {}
        for index in range(count):
            groups.setdefault(_find(parents, index), []).append(index)

        for group in groups.values():
            total = Vec3()
            for index in group:
                total = total + normals[index]
            # Divided by the number of normals at this position, not the group size.
            new_normal = total / count
            for index in group:
                store, slot = slots[index]
                store[slot] = new_normal


@dataclass
class GeometryProvider:
    """An ordered stack of functions run over an entity's meshes."""

    providers: list[Callable[[Any], None]] = field(default_factory=list)

    def push(self, provider: Callable[[Any], None]) -> GeometryProvider:
        """Add a function to the stack; returns self for chaining."""
        self.providers.append(provider)
        return self

    def smooth_by_default_angle(self) -> GeometryProvider:
        """Smooth normals using ``DEFAULT_NORMAL_SMOOTH_THRESHOLD``."""
        return self.smooth_by_angle(DEFAULT_NORMAL_SMOOTH_THRESHOLD)

    def smooth_by_angle(self, normal_smooth_threshold: float) -> GeometryProvider:
        """Smooth normals of coincident vertices closer than the threshold; <= 0 does nothing."""
        return self.push(lambda meshes: smooth_normals(meshes, normal_smooth_threshold))

    def apply(self, meshes: Sequence[MeshData]) -> None:
        """Run every function in the stack, in order, over ``meshes``."""
        for provider in self.providers:
            provider(meshes)