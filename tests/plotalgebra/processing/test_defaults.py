import pandas as pd
import pytest

from plotalgebra.config import PlotConfig
from plotalgebra.errors import AmbiguousRolesError
from plotalgebra.forms.algebra import d_cross, d_blend, layer, mapping
from plotalgebra.forms.layer import Layer, Spec
from plotalgebra.forms.marks import histogram, linear, scatter, smooth
from plotalgebra.processing.defaults import (
    is_diagonal, auto_assign_roles, is_grid, resolve_roles,
    apply_defaults, smart_defaults, when_diagonal, when_off_diagonal,
)


def test_is_diagonal():
    assert is_diagonal({"x": "a", "y": "a"})
    assert not is_diagonal({"x": "a", "y": "b"})
    assert not is_diagonal({"x": "a"})
    assert not is_diagonal({})


def test_auto_assign_roles_by_arity():
    assert auto_assign_roles({"columns": ["a"]}).select("x", "y") == {"x": "a"}
    assert auto_assign_roles({"columns": ["a", "b"]}).select("x", "y") == {"x": "a", "y": "b"}
    assert auto_assign_roles({"plottype": "line"}) == {"plottype": "line"}


def test_auto_assign_roles_is_idempotent_and_respects_explicit_roles():
    once = auto_assign_roles({"columns": ["a", "b"]})
    assert auto_assign_roles(once) == once
    explicit = auto_assign_roles({"columns": ["a", "b", "c"], "x": "c"})
    assert explicit["x"] == "c" and "y" not in explicit


def test_three_columns_are_ambiguous():
    with pytest.raises(AmbiguousRolesError) as ei:
        auto_assign_roles({"columns": ["a", "b", "c"]})
    assert ei.value.columns == ["a", "b", "c"]
    assert ei.value.layer["columns"] == ["a", "b", "c"]
    # also a ValueError for callers that don't know the library's types
    with pytest.raises(ValueError):
        smart_defaults(mapping("a", "b", "c"))


def test_is_grid(df):
    assert is_grid(d_cross(df, ["a", "b"], ["a", "b"]))
    assert not is_grid(d_cross(df, ["a"], ["b"]))
    assert not is_grid(d_blend(df, ["a", "b"]))


def test_resolve_roles_grid_positions(df):
    s = resolve_roles(d_cross(df, ["a", "b", "c"], ["a", "b", "c"]))
    assert s.layout == "grid"
    assert len(s) == 9
    pos = {(l["x"], l["y"]): (l["grid_row"], l["grid_col"]) for l in s}
    assert pos[("a", "a")] == (0, 0)
    assert pos[("b", "a")] == (0, 1)
    assert pos[("a", "c")] == (2, 0)
    assert pos[("c", "b")] == (1, 2)
    assert [l["diagonal"] for l in s].count(True) == 3
    assert all("plottype" not in l for l in s)


def test_resolve_roles_non_grid_has_no_positions(df):
    s = resolve_roles(layer(df, "a", "b"))
    assert s.layout is None
    assert "grid_row" not in s[0]
    assert s[0]["diagonal"] is False


def test_grid_with_explicit_x_takes_y_from_columns(df):
    s = smart_defaults(d_cross(df, ["a", "b"], ["a", "b"]) * mapping(x="a"))
    assert s.layout == "grid"
    assert all(l["x"] == "a" for l in s)
    assert [l["y"] for l in s] == ["a", "b", "a", "b"]
    assert [(l["grid_row"], l["grid_col"]) for l in s] == [(0, 0), (1, 0), (0, 1), (1, 1)]
    assert [l["plottype"] for l in s] == ["histogram", "scatter", "histogram", "scatter"]


def test_smart_defaults_splom(df):
    s = smart_defaults(d_cross(df, ["a", "b"], ["a", "b"]))
    assert [(l["x"], l["y"], l["plottype"]) for l in s] == [
        ("a", "a", "histogram"),
        ("a", "b", "scatter"),
        ("b", "a", "scatter"),
        ("b", "b", "histogram"),
    ]


def test_smart_defaults_univariate_and_bivariate(df):
    uni = smart_defaults(layer(df, "a"))
    assert uni[0]["plottype"] == "histogram"
    assert uni[0]["diagonal"] is False
    bi = smart_defaults(layer(df, "a", "b"))
    assert bi[0]["plottype"] == "scatter"


def test_transformation_implies_plottype():
    s = apply_defaults(Spec([{"x": "a", "y": "b", "transformation": "smooth"}]))
    assert s[0]["plottype"] == "line"
    s = apply_defaults(Spec([{"x": "a", "transformation": "bin"}]))
    assert s[0]["plottype"] == "histogram"


def test_user_values_win_and_pass_is_idempotent(df):
    s = smart_defaults(layer(df, "a", "b") * (scatter() + linear()))
    assert [l["plottype"] for l in s] == ["scatter", "line"]
    assert smart_defaults(s) == s


def test_layers_without_roles_are_left_alone():
    s = apply_defaults(Spec([{"plottype": None, "title": "t"}]))
    assert "plottype" not in s[0] or s[0]["plottype"] is None


def test_custom_defaults_and_config(df):
    s = apply_defaults(resolve_roles(d_cross(df, ["a", "b"], ["a", "b"])),
                       custom={"diagonal": {"plottype": "density"}})
    assert [l["plottype"] for l in s if l["diagonal"]] == ["density", "density"]

    cfg = PlotConfig(off_diagonal_plottype="line")
    s = smart_defaults(layer(df, "a", "b"), config=cfg)
    assert s[0]["plottype"] == "line"


def test_when_diagonal_and_off_diagonal(df):
    s = smart_defaults(d_cross(df, ["a", "b"], ["a", "b"]))
    s = when_diagonal(s, {"plottype": "density"})
    s = when_off_diagonal(s, {"alpha": 0.3})
    assert [l["plottype"] for l in s] == ["density", "scatter", "scatter", "density"]
    assert [l.get("alpha") for l in s] == [None, 0.3, 0.3, None]


def test_smooth_layer_inherits_roles_through_blend(df):
    base = Layer(data=df, x="a", y="b", plottype="scatter")
    s = smart_defaults(Spec([base]) + smooth(window=2))
    assert s[1].select("x", "y", "plottype") == {"x": "a", "y": "b", "plottype": "line"}


# -----------------------
# Fixtures
# -----------------------

@pytest.fixture
def df():
    return pd.DataFrame({
        "a": [1.0, 2.0, 3.0],
        "b": [3.0, 1.0, 2.0],
        "c": [0.0, 5.0, 1.0],
    })
