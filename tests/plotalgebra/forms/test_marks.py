import pandas as pd
import pytest

from plotalgebra.forms.algebra import layer
from plotalgebra.forms.marks import scatter, line, linear, smooth, histogram, bar, density


@pytest.mark.parametrize("ctor, plottype, transformation", [
    (scatter, "scatter", None),
    (line, "line", "identity"),
    (linear, "line", "linear"),
    (smooth, "line", "smooth"),
    (histogram, "histogram", "bin"),
    (bar, "bar", None),
    (density, "density", None),
])
def test_mark_constructors(ctor, plottype, transformation):
    s = ctor()
    assert len(s) == 1
    assert s[0]["plottype"] == plottype
    assert s[0].get("transformation") == transformation
    assert "data" not in s[0]


def test_mark_options_are_carried():
    assert smooth(window=3)[0]["window"] == 3
    assert histogram(bins=7)[0]["bins"] == 7
    assert "bins" not in histogram()[0]
    assert scatter(alpha=0.2)[0]["alpha"] == 0.2


def test_marks_cross_into_data_layers(df):
    s = layer(df, "a", "b") * (scatter() + linear())
    assert [(l["columns"], l["plottype"]) for l in s] == [
        (["a", "b"], "scatter"),
        (["a", "b"], "line"),
    ]
    assert all(l["data"] is df for l in s)


# -----------------------
# Fixtures
# -----------------------

@pytest.fixture
def df():
    return pd.DataFrame({"a": [1, 2, 3], "b": [2, 4, 7]})
