import pandas as pd
import pytest
from matplotlib.figure import Figure

from plotalgebra.config import PlotConfig
from plotalgebra.errors import MissingRoleError
from plotalgebra.forms.algebra import d_cross, layer, mapping, plot_props
from plotalgebra.forms.marks import bar, density, histogram, linear, scatter, smooth
from plotalgebra.render import GEOMS, prepare, register_geom, render, save


def test_splom_renders_grid(iris_like):
    cols = ["sepal", "petal", "width"]
    fig = render(d_cross(iris_like, cols, cols))
    assert isinstance(fig, Figure)
    assert len(fig.axes) == 9
    # diagonal panels are histograms (bars), off-diagonal are scatters
    assert len(fig.axes[0].patches) > 0
    assert len(fig.axes[1].collections) == 1


def test_grid_panel_addressing(iris_like):
    fig = render(d_cross(iris_like, ["sepal", "petal"], ["sepal", "petal"]))
    axes = fig.axes
    # column 0 holds x = sepal; row 1 holds y = petal
    assert axes[2].get_xlabel() == "sepal"
    assert axes[2].get_ylabel() == "petal"


def test_colored_splom_has_legend(iris_like):
    spec = d_cross(iris_like, ["sepal", "petal"], ["sepal", "petal"]) * mapping(color="species")
    fig = render(spec)
    legend = fig.axes[1].get_legend()
    assert legend is not None
    assert [t.get_text() for t in legend.get_texts()] == ["setosa", "versicolor", "virginica"]


def test_single_axes_overlay(iris_like):
    spec = layer(iris_like, "sepal", "petal") * (scatter() + linear() + smooth(window=2))
    fig = render(spec)
    assert len(fig.axes) == 1


def test_single_axes_non_grid(iris_like):
    fig = render(layer(iris_like, "sepal") * histogram(bins=3) * plot_props(title="Sepal"))
    assert len(fig.axes) == 1
    ax = fig.axes[0]
    assert len(ax.patches) == 3
    assert ax.get_xlabel() == "sepal"
    assert fig._suptitle.get_text() == "Sepal"


@pytest.mark.parametrize("mark", [density(), bar()])
def test_other_geoms(iris_like, mark):
    fig = render(layer(iris_like, "sepal") * mark)
    assert len(fig.axes) == 1


def test_prepare_runs_defaults_and_spread(iris_like):
    spec = prepare(layer(iris_like, "sepal", "petal", color="species"))
    assert [l["color_index"] for l in spec] == [0, 1, 2]
    assert all(l["plottype"] == "scatter" for l in spec)


def test_unknown_plottype_raises(iris_like):
    with pytest.raises(ValueError, match="Unknown plottype"):
        render(layer(iris_like, "sepal", "petal", plottype="hexbin"))


def test_register_geom(iris_like):
    calls = []

    @register_geom("rug")
    def _rug(ax, frame, layer, color, config):
        calls.append(len(frame))

    try:
        render(layer(iris_like, "sepal", plottype="rug"))
        assert calls == [len(iris_like)]
    finally:
        GEOMS.pop("rug")


def test_save_writes_file(iris_like, tmp_path):
    out = tmp_path / "splom.png"
    save(d_cross(iris_like, ["sepal", "petal"], ["sepal", "petal"]), str(out),
         config=PlotConfig(panel_size=1.0), dpi=50)
    assert out.exists() and out.stat().st_size > 0


def test_colored_plot_with_missing_group_renders():
    df = pd.DataFrame({"a": [1.0, 2.0, 3.0], "b": [3.0, 1.0, 2.0], "g": ["m", float("nan"), "f"]})
    fig = render(layer(df, "a", "b", color="g"))
    labels = [t.get_text() for t in fig.axes[0].get_legend().get_texts()]
    assert labels == ["f", "m", "nan"]


def test_mark_blended_onto_positional_layer_names_missing_role(iris_like):
    with pytest.raises(MissingRoleError, match="no 'x' role"):
        render(layer(iris_like, "sepal", "petal") + linear())
