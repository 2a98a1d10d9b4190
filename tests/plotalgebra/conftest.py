import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import pytest


@pytest.fixture
def iris_like():
    # Three numeric columns and a two-level group
    return pd.DataFrame({
        "sepal": [5.1, 4.9, 6.3, 5.8, 7.1, 6.5],
        "petal": [1.4, 1.3, 4.9, 4.1, 5.9, 5.2],
        "width": [0.2, 0.2, 1.8, 1.0, 2.1, 2.0],
        "species": ["setosa", "setosa", "virginica", "versicolor", "virginica", "versicolor"],
    })


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")
