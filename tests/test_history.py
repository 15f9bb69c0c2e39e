import pytest

from motorsim.sim.history import HistoryBuffer, Sample


def test_capacity_must_be_positive_integer():
    with pytest.raises(ValueError):
        HistoryBuffer(0)
    with pytest.raises(ValueError):
        HistoryBuffer(2.5)


def test_evicts_oldest_first():
    h = HistoryBuffer(3)
    for i in range(1, 6):
        h.append(i * 0.1, 50.0, float(i))
    assert len(h) == 3
    assert [s.actual for s in h] == [3.0, 4.0, 5.0]


def test_snapshot_is_detached():
    h = HistoryBuffer(3)
    h.append(0.1, 10.0, 1.0)
    snap = h.snapshot()
    h.append(0.2, 10.0, 2.0)
    assert snap == (Sample(0.1, 10.0, 1.0),)


def test_clear_and_dataframe():
    h = HistoryBuffer()
    assert h.capacity == 100
    h.append(0.05, 20.0, 1.5)
    h.append(0.10, 20.0, 2.5)
    df = h.to_dataframe()
    assert list(df.columns) == ["time", "desired", "actual"]
    assert df["actual"].tolist() == [1.5, 2.5]
    h.clear()
    assert len(h) == 0
    assert len(h.to_dataframe()) == 0
