import pandas as pd
import pytest
from rich.console import Console

from plotalgebra.forms.algebra import d_cross, layer, mapping
from plotalgebra.forms.layer import Layer
from plotalgebra.pretty import DESCRIBE_KEYS, describe, format_layer, print_spec
from plotalgebra.processing.defaults import smart_defaults


def test_describe_one_row_per_layer(df):
    out = describe(smart_defaults(d_cross(df, ["a", "b"], ["a", "b"])))
    assert isinstance(out, pd.DataFrame)
    assert list(out.columns) == list(DESCRIBE_KEYS) + ["data"]
    assert len(out) == 4
    assert out["plottype"].tolist() == ["histogram", "scatter", "scatter", "histogram"]
    assert out["grid_row"].tolist() == [0, 1, 0, 1]


def test_describe_missing_keys_are_none():
    out = describe(mapping("a", "b"))
    assert out.loc[0, "x"] is None
    assert out.loc[0, "data"] == ""


def test_describe_data_summary(df):
    assert describe(layer(df, "a")).loc[0, "data"] == "3x3"
    assert describe(Layer(indices=[0, 1])).loc[0, "data"] == "2 rows"


def test_format_layer():
    lyr = Layer(x="a", y="b", plottype="scatter", grid_row=1, grid_col=0)
    assert format_layer(lyr) == "scatter(x=a, y=b) @ [1,0]"
    assert format_layer(Layer(columns=["a", "b"])) == "layer(a, b)"
    fit = Layer(x="a", y="b", plottype="line", transformation="linear", color="g", color_value="u")
    assert format_layer(fit) == "line[linear](x=a, y=b, color=g) | g=u"


def test_print_spec_renders_table(df):
    console = Console(record=True, width=200)
    print_spec(smart_defaults(d_cross(df, ["a", "b"], ["a", "b"])), console=console, title="SPLOM")
    text = console.export_text()
    assert "SPLOM" in text
    assert "histogram" in text and "scatter" in text
    assert "layout" in text


# -----------------------
# Fixtures
# -----------------------

@pytest.fixture
def df():
    return pd.DataFrame({"a": [1, 2, 3], "b": [3, 2, 1], "g": ["u", "v", "u"]})
