"""Tests for the GeoSeries / GeoDataFrame batch worker."""

import geopandas as gpd
import pytest
from shapely.geometry import LineString

from geosimplify import SimplifySettings, simplify_frame, simplify_series


@pytest.fixture
def layer(adjacent_polygons):
    """Two neighbouring polygons and a missing geometry, with a non-default index and CRS."""
    left, right = adjacent_polygons
    return gpd.GeoDataFrame(
        {"name": ["left", "right", "missing"]},
        geometry=[left, right, None],
        index=[10, 20, 30],
        crs="EPSG:3857",
    )


class TestSimplifySeries:
    """Tests for simplify_series."""

    def test_topology_batch(self, layer):
        result = simplify_series(layer.geometry, SimplifySettings(tolerance=0.5))
        assert list(result.index) == [10, 20, 30]
        assert result.crs == layer.crs
        assert list(result[10].exterior.coords) == [(0, 0), (0, 10), (5, 10), (5, 0), (0, 0)]
        assert list(result[20].exterior.coords) == [(5, 0), (5, 10), (10, 10), (10, 0), (5, 0)]
        assert result[30] is None

    def test_progress_reaches_100(self, layer):
        calls = []
        simplify_series(layer.geometry, SimplifySettings(tolerance=0.5),
                        report_progress=lambda percent, message: calls.append((percent, message)))
        assert calls[0][0] == 0
        assert calls[-1][0] == 100
        assert "coordinates" in calls[-1][1]
        percents = [p for p, _ in calls]
        assert percents == sorted(percents)

    def test_sequential_douglas_peucker(self, layer):
        calls = []
        settings = SimplifySettings(tolerance=0.5, method="douglas_peucker", ensure_valid=False)
        result = simplify_series(layer.geometry, settings,
                                 report_progress=lambda percent, message: calls.append(percent))
        assert list(result[10].exterior.coords) == [(0, 0), (0, 10), (5, 10), (5, 0), (0, 0)]
        assert result[30] is None
        assert calls[-1] == 100

    def test_process_pool(self, layer):
        settings = SimplifySettings(tolerance=0.5, method="douglas_peucker", processes=2)
        pooled = simplify_series(layer.geometry, settings)
        sequential = simplify_series(layer.geometry, SimplifySettings(tolerance=0.5, method="douglas_peucker"))
        assert list(pooled.index) == list(sequential.index)
        for a, b in zip(pooled.iloc[:2], sequential.iloc[:2]):
            assert a.equals(b)
        assert pooled.iloc[2] is None

    def test_detail_preset(self):
        series = gpd.GeoSeries([LineString([(0, 0), (5, 2), (10, 0)])])
        result = simplify_series(series, SimplifySettings(tolerance="low", method="douglas_peucker"))
        assert list(result[0].coords) == [(0, 0), (10, 0)]

    def test_unknown_method(self, layer):
        with pytest.raises(ValueError, match="Unknown simplification method"):
            simplify_series(layer.geometry, SimplifySettings(tolerance=1.0, method="radial"))

    def test_negative_tolerance(self, layer):
        with pytest.raises(ValueError, match="non-negative"):
            simplify_series(layer.geometry, SimplifySettings(tolerance=-1.0))


class TestSimplifyFrame:
    """Tests for simplify_frame."""

    def test_other_columns_are_kept(self, layer):
        result = simplify_frame(layer, SimplifySettings(tolerance=0.5))
        assert isinstance(result, gpd.GeoDataFrame)
        assert list(result["name"]) == ["left", "right", "missing"]
        assert result.crs == layer.crs
        assert result.geometry.iloc[0].bounds == (0.0, 0.0, 5.0, 10.0)

    def test_input_is_not_modified(self, layer):
        before = layer.geometry.iloc[0]
        simplify_frame(layer, SimplifySettings(tolerance=0.5))
        assert layer.geometry.iloc[0].equals(before)
        assert layer.geometry.iloc[0].bounds == (0.0, 0.0, 5.1, 10.0)
