import numpy as np
import pandas as pd
import pytest

from plotalgebra.errors import MissingDataError
from plotalgebra.forms.algebra import d_cross, layer, mapping
from plotalgebra.forms.layer import Spec
from plotalgebra.processing.defaults import smart_defaults
from plotalgebra.processing.spread import spread, assign_color_indices


def test_spread_by_color_splits_data(df):
    s = spread(layer(df, "x", "y", color="g"))
    assert [l["color_value"] for l in s] == ["a", "b"]
    assert [len(l["data"]) for l in s] == [3, 2]
    assert s[0]["indices"] == [0, 2, 4]
    assert s[1]["data"]["x"].tolist() == [2, 4]


def test_spread_is_idempotent(df):
    once = spread(layer(df, "x", "y", color="g"))
    twice = spread(once)
    assert len(twice) == len(once)
    assert [l["color_value"] for l in twice] == ["a", "b"]


def test_spread_uses_facet_when_no_color(df):
    s = spread(layer(df, "x", "y", facet="h"))
    assert [l["facet_value"] for l in s] == [1, 2]
    assert all("color_value" not in l for l in s)


def test_spread_passes_through_ungrouped_layers(df):
    s = layer(df, "x", "y")
    assert spread(s) == s


def test_spread_uses_plot_data_for_grid(df):
    s = smart_defaults(d_cross(df, ["x", "y"], ["x", "y"]) * mapping(color="g"))
    out = spread(s)
    assert len(out) == 8
    assert out.layout == "grid"
    first = out[0]
    assert (first["grid_row"], first["grid_col"], first["color_value"]) == (0, 0, "a")


def test_spread_keeps_nan_groups():
    df = pd.DataFrame({"x": [1, 2, 3], "g": ["a", np.nan, "a"]})
    s = spread(layer(df, "x", color="g"))
    assert len(s) == 2
    assert s[0]["color_value"] == "a"
    assert pd.isna(s[1]["color_value"])


def test_spread_without_data_raises():
    with pytest.raises(MissingDataError):
        spread(mapping("x", color="g"))


def test_assign_color_indices_sorted(df):
    s = Spec([
        {"x": "x", "color_value": "b"},
        {"x": "x", "color_value": "a"},
        {"x": "x"},
        {"x": "x", "color_value": "b"},
    ])
    out = assign_color_indices(s)
    assert [l.get("color_index") for l in out] == [1, 0, None, 1]


def test_assign_color_indices_puts_missing_group_last():
    df = pd.DataFrame({"x": [1, 2, 3, 4], "y": [4, 3, 2, 1], "g": ["m", np.nan, "f", np.nan]})
    out = assign_color_indices(spread(layer(df, "x", "y", color="g")))
    assert len(out) == 3
    by_index = {l["color_index"]: l["color_value"] for l in out}
    assert by_index[0] == "f"
    assert by_index[1] == "m"
    assert pd.isna(by_index[2])


def test_assign_color_indices_numeric_groups_with_missing():
    s = Spec([
        {"x": "x", "color_value": 2.0},
        {"x": "x", "color_value": np.nan},
        {"x": "x", "color_value": 1.0},
    ])
    out = assign_color_indices(s)
    assert [l["color_index"] for l in out] == [1, 2, 0]


# -----------------------
# Fixtures
# -----------------------

@pytest.fixture
def df():
    return pd.DataFrame({
        "x": [1, 2, 3, 4, 5],
        "y": [5, 4, 3, 2, 1],
        "g": ["a", "b", "a", "b", "a"],
        "h": [1, 1, 2, 2, 2],
    })
