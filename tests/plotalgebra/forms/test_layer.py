import pandas as pd
import pytest

from plotalgebra.forms.layer import Layer, Spec, to_spec


def test_layer_is_immutable_mapping():
    lyr = Layer(columns=["a"], plottype="scatter")
    assert dict(lyr) == {"columns": ["a"], "plottype": "scatter"}
    with pytest.raises(AttributeError):
        lyr.x = "a"
    with pytest.raises(TypeError):
        lyr["x"] = "a"


def test_assoc_dissoc_merge_return_new_layers():
    lyr = Layer(columns=["a"])
    l2 = lyr.assoc(x="a")
    assert "x" not in lyr and l2["x"] == "a"
    assert "columns" not in l2.dissoc("columns")
    assert lyr.merge({"y": "b"}, {"y": "c"})["y"] == "c"
    assert l2.select("y", "x") == {"x": "a"}


def test_layer_equality_compares_frames_by_identity(df):
    assert Layer(data=df, x="a") == Layer(data=df, x="a")
    assert Layer(data=df, x="a") != Layer(data=df.copy(), x="a")
    assert Layer(x="a") == {"x": "a"}


def test_layer_repr_shortens_dataframes(df):
    assert "<DataFrame 3x2>" in repr(Layer(data=df))


def test_spec_converts_mappings_and_is_sequence_like():
    s = Spec([{"columns": ["a"]}, Layer(columns=["b"])], {"width": 400})
    assert len(s) == 2
    assert all(isinstance(l, Layer) for l in s)
    assert s[1]["columns"] == ["b"]
    assert s.props["width"] == 400
    assert s.layout is None and s.data is None


def test_spec_operators_cross_and_blend():
    a = Spec([{"columns": ["a"]}])
    b = Spec([{"columns": ["b"]}])
    assert [l["columns"] for l in a * b] == [["a", "b"]]
    assert [l["columns"] for l in a + b] == [["a"], ["b"]]
    # plain mappings on either side
    assert [l["columns"] for l in {"columns": ["z"]} * a] == [["z", "a"]]
    assert len(a + {"plottype": "line"}) == 2


def test_with_props_and_map_layers():
    s = Spec([{"x": "a"}]).with_props(title="t")
    assert s.props["title"] == "t"
    s2 = s.map_layers(lambda l: l.assoc(y="b"))
    assert s2[0]["y"] == "b" and s2.props["title"] == "t"


def test_empty_spec_has_no_layers():
    s = Spec()
    assert len(s) == 0
    assert s.layers == ()


def test_to_spec_coercions():
    s = Spec([{"x": "a"}])
    assert to_spec(s) is s
    assert len(to_spec(None)) == 0
    assert to_spec({"color": "g"})[0]["color"] == "g"
    with pytest.raises(TypeError):
        to_spec(42)


# -----------------------
# Fixtures
# -----------------------

@pytest.fixture
def df():
    return pd.DataFrame({"a": [1, 2, 3], "b": [4, 5, 6]})
