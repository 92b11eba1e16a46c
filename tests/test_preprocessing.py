import struct

import numpy as np
import pytest

from balanced_mssc.exceptions import InstanceFormatError, SnapshotError
from balanced_mssc.metrics.distance_cache import DistanceCache
from balanced_mssc.preprocessing import read_instance, read_snapshot, snapshot_path, write_snapshot
from balanced_mssc.solvers.solution import Solution


# ------------------------------------------------------------------
# instance files
# ------------------------------------------------------------------
def test_mixed_delimiters_and_blank_lines(tmp_path):
    path = tmp_path / "mixed.txt"
    path.write_bytes(b"1.0,2.0\r\n\r\n3.5 4\r\n  -1, -2  ,\n\n")
    X = read_instance(path)
    assert X.shape == (3, 2)
    assert X.dtype == np.float64
    assert X.tolist() == [[1.0, 2.0], [3.5, 4.0], [-1.0, -2.0]]


def test_tabs_and_repeated_spaces(tmp_path):
    path = tmp_path / "tabs.txt"
    path.write_text("0\t0\t1\n2    3   4\n5,\t6 ,7\n")
    assert read_instance(path).tolist() == [[0, 0, 1], [2, 3, 4], [5, 6, 7]]


def test_single_coordinate_points(tmp_path):
    path = tmp_path / "line.txt"
    path.write_text("1\n2\n4\n")
    assert read_instance(path).shape == (3, 1)


@pytest.mark.parametrize("text", ["1,2\n3,4,5\n", "1,2,3\n4,5\n"])
def test_ragged_rows_rejected(tmp_path, text):
    path = tmp_path / "ragged.txt"
    path.write_text(text)
    with pytest.raises(InstanceFormatError):
        read_instance(path)


def test_non_numeric_token_rejected(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("1,2\n3,abc\n")
    with pytest.raises(InstanceFormatError):
        read_instance(path)


def test_empty_instance_rejected(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("\n\n")
    with pytest.raises(InstanceFormatError):
        read_instance(path)


def test_missing_instance(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_instance(tmp_path / "nope.txt")


# ------------------------------------------------------------------
# snapshots
# ------------------------------------------------------------------
def test_snapshot_path():
    assert snapshot_path("inits", "data/iris.txt", 3).as_posix() == "inits/iris-init3.bin"


def test_snapshot_layout(tmp_path, four_points):
    sol = Solution(2, 4, DistanceCache(four_points))
    sol.set_assignment(np.array([0, 1, 0, 1]))
    path = write_snapshot(tmp_path / "s.bin", sol, init_time=1.25)

    data = path.read_bytes()
    assert len(data) == 4 + 8 + 4 + 4 + 4 * 4 + 8 * 2
    assert struct.unpack_from("<idii", data) == (1, 1.25, 4, 2)
    assert struct.unpack_from("<4i", data, 20) == (0, 1, 0, 1)
    assert struct.unpack_from("<2d", data, 36) == (2.0, 2.0)


def test_snapshot_load_rebuilds_state(tmp_path, uneven_points, make_solution):
    saved = make_solution(uneven_points, 4, seed=3)
    path = write_snapshot(tmp_path / "s.bin", saved, init_time=0.5)

    target = Solution(4, saved.n_points, saved.distances)
    init_time = read_snapshot(path, target)

    assert init_time == 0.5
    assert np.array_equal(target.assignment, saved.assignment)
    assert target.objective == pytest.approx(saved.objective)
    target.verify()


def _blank(four_points):
    return Solution(2, 4, DistanceCache(four_points))


def _raw(version=1, n=4, k=2, labels=(0, 1, 0, 1), sizes=(2.0, 2.0)):
    return (
        struct.pack("<idii", version, 0.0, n, k)
        + struct.pack(f"<{len(labels)}i", *labels)
        + struct.pack(f"<{len(sizes)}d", *sizes)
    )


@pytest.mark.parametrize(
    "payload, match",
    [
        (_raw(version=2), "version"),
        (_raw(n=5), "N=5"),
        (_raw(k=3, sizes=(2.0, 1.0, 1.0)), "K=3"),
        (_raw()[:-4], "bytes"),
        (b"\x01\x00", "truncated"),
        (_raw(labels=(0, 2, 0, 1)), "outside"),
        (_raw(sizes=(3.0, 1.0)), "do not match"),
        (_raw(labels=(0, 0, 0, 1), sizes=(3.0, 1.0)), "not balanced"),
    ],
)
def test_bad_snapshots_rejected(tmp_path, four_points, payload, match):
    path = tmp_path / "bad.bin"
    path.write_bytes(payload)
    sol = _blank(four_points)
    with pytest.raises(SnapshotError, match=match):
        read_snapshot(path, sol)
    # a rejected snapshot leaves the solution untouched
    assert (sol.assignment == -1).all()


@pytest.mark.parametrize("token", ["nan", "inf", "-inf"])
def test_non_finite_coordinate_rejected(tmp_path, token):
    path = tmp_path / "nan.txt"
    path.write_text(f"1,2\n3,{token}\n")
    with pytest.raises(InstanceFormatError, match="point 1 has a non-finite coordinate"):
        read_instance(path)


def test_ragged_row_names_the_point(tmp_path):
    path = tmp_path / "ragged.txt"
    path.write_text("1,2\n3,4\n5\n")
    with pytest.raises(InstanceFormatError, match="point 2 has 1 coordinates"):
        read_instance(path)
