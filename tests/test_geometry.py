import math

from trenchtools.geometry import (
    DEFAULT_NORMAL_SMOOTH_THRESHOLD,
    GeometryProvider,
    MeshData,
    smooth_normals,
)
from trenchtools.util import Vec3


def _two_vertex_mesh(a, b):
    origin = Vec3(0.0, 0.0, 0.0)
    return MeshData(positions=[origin, origin], normals=[a, b])


def _unit(angle):
    return Vec3(math.cos(angle), math.sin(angle), 0.0)


def test_default_threshold_merges_below_quarter_pi():
    mesh = _two_vertex_mesh(_unit(0.0), _unit(0.7))
    smooth_normals([mesh], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert mesh.normals[0] == mesh.normals[1]


def test_close_normals_are_averaged():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(0.96, 0.28, 0.0)
    mesh = _two_vertex_mesh(a, b)
    smooth_normals([mesh], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert mesh.normals[0] == mesh.normals[1]
    assert mesh.normals[0].almost_eq((a + b) / 2, 1e-6)


def test_non_positive_threshold_leaves_normals():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(0.96, 0.28, 0.0)
    mesh = _two_vertex_mesh(a, b)
    smooth_normals([mesh], 0.0)
    assert mesh.normals == [a, b]


def test_distinct_positions_untouched():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(0.96, 0.28, 0.0)
    mesh = MeshData(positions=[Vec3(0.0, 0.0, 0.0), Vec3(1.0, 0.0, 0.0)], normals=[a, b])
    smooth_normals([mesh], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert mesh.normals == [a, b]


def test_far_apart_normals_stay_distinct():
    mesh = _two_vertex_mesh(Vec3(1.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    smooth_normals([mesh], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert mesh.normals[0] != mesh.normals[1]
    assert mesh.normals[0].y == 0.0
    assert mesh.normals[1].x == 0.0


def test_smoothing_spans_meshes():
    a = Vec3(0.0, 0.0, 1.0)
    b = Vec3(0.0, 0.28, 0.96)
    first = MeshData(positions=[Vec3(1.0, 2.0, 3.0)], normals=[a])
    second = MeshData(positions=[Vec3(1.00001, 2.0, 3.0)], normals=[b])
    smooth_normals([first, second], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert first.normals[0] == second.normals[0]


def test_grouping_is_transitive():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(math.cos(0.5), math.sin(0.5), 0.0)
    c = Vec3(math.cos(1.0), math.sin(1.0), 0.0)
    origin = Vec3()
    mesh = MeshData(positions=[origin, origin, origin], normals=[a, b, c])
    smooth_normals([mesh], 0.6)
    assert mesh.normals[0] == mesh.normals[1] == mesh.normals[2]


def test_mismatched_lengths_leave_mesh_unchanged():
    a = Vec3(1.0, 0.0, 0.0)
    mesh = MeshData(positions=[Vec3(), Vec3()], normals=[a])
    smooth_normals([mesh], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert mesh.normals == [a]


def test_missing_normals_abort_without_changes():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(0.96, 0.28, 0.0)
    good = _two_vertex_mesh(a, b)
    broken = MeshData(positions=[Vec3()], normals=None)
    smooth_normals([good, broken], DEFAULT_NORMAL_SMOOTH_THRESHOLD)
    assert good.normals == [a, b]


def test_provider_runs_in_order():
    calls = []
    provider = GeometryProvider().push(lambda meshes: calls.append(("first", len(meshes))))
    provider.push(lambda meshes: calls.append(("second", len(meshes))))
    provider.apply([MeshData(), MeshData()])
    assert calls == [("first", 2), ("second", 2)]


def test_provider_smooth_by_default_angle():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(0.96, 0.28, 0.0)
    mesh = _two_vertex_mesh(a, b)
    provider = GeometryProvider().smooth_by_default_angle()
    assert len(provider.providers) == 1
    provider.apply([mesh])
    assert mesh.normals[0] == mesh.normals[1]


def test_provider_smooth_by_negative_angle_is_noop():
    a = Vec3(1.0, 0.0, 0.0)
    b = Vec3(0.96, 0.28, 0.0)
    mesh = _two_vertex_mesh(a, b)
    GeometryProvider().smooth_by_angle(-1.0).apply([mesh])
    assert mesh.normals == [a, b]