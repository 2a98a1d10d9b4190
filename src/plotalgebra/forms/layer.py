# src/plotalgebra/forms/layer.py

"""
Layer and Spec: the two value types of the plotting algebra.

A :class:`Layer` is an immutable key/value map describing one data-to-mark
mapping (dataset, positional columns, aesthetic roles, geometry, grid
coordinates). A :class:`Spec` is a tuple of layers plus plot-level
properties (layout, shared dataset, size, title).

Specs compose with two operators:

- ``a * b`` : cross (Cartesian product of layers, merged pairwise)
- ``a + b`` : blend (concatenation of layers into alternatives)

Examples
--------
>>> import pandas as pd
>>> from plotalgebra.forms.layer import Layer, Spec
>>> df = pd.DataFrame({"a": [1, 2], "b": [3, 4]})
>>> s = Spec([Layer(data=df, columns=["a"])]) * Spec([Layer(columns=["b"])])
>>> s.layers[0]["columns"]
['a', 'b']
>>> len(Spec([Layer(columns=["a"])]) + Spec([Layer(columns=["b"])]))
2
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple, Union

import pandas as pd

from .utils import values_equal

__all__ = [
    "Layer",
    "Spec",
    "to_spec",
]


def _short(v: Any) -> str:
    if isinstance(v, pd.DataFrame):
        return f"<DataFrame {v.shape[0]}x{v.shape[1]}>"
    if isinstance(v, list) and len(v) > 8:
        return f"[{', '.join(map(repr, v[:3]))}, ... ({len(v)} items)]"
    return repr(v)


# ---------------------------------------------------------------------
# Layer
# ---------------------------------------------------------------------
class Layer(Mapping):
    """
    Immutable mapping describing one data-to-mark mapping.

    Parameters
    ----------
    props : Mapping, optional
        Initial properties.
    **kwargs
        Additional properties; override ``props``.

    Notes
    -----
    - Every "mutation" (:meth:`assoc`, :meth:`dissoc`, :meth:`merge`) returns
      a new Layer.
    - Equality compares DataFrame values by identity and other values by
      ``==``; layers are unhashable.

    Examples
    --------
    >>> lyr = Layer(columns=["a", "b"])
    >>> lyr.assoc(x="a", y="b")["y"]
    'b'
    >>> "x" in lyr
    False
    """

    __slots__ = ("_props",)

    def __init__(self, props: Optional[Mapping] = None, **kwargs: Any):
        d: Dict[str, Any] = dict(props) if props is not None else {}
        d.update(kwargs)
        object.__setattr__(self, "_props", d)

    def __setattr__(self, name, value):
        raise AttributeError("Layer is immutable; use assoc()/merge()")

    # Mapping protocol
    def __getitem__(self, key: str) -> Any:
        return self._props[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._props)

    def __len__(self) -> int:
        return len(self._props)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        return values_equal(dict(self._props), dict(other))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        body = ", ".join(f"{k}={_short(v)}" for k, v in self._props.items())
        return f"Layer({body})"

    # Persistent updates
    def assoc(self, **kwargs: Any) -> "Layer":
        """Return a copy with the given keys set."""
        return Layer(self._props, **kwargs)

    def dissoc(self, *keys: str) -> "Layer":
        """Return a copy without the given keys."""
        return Layer({k: v for k, v in self._props.items() if k not in keys})

    def merge(self, *others: Mapping) -> "Layer":
        """Return a copy with ``others`` merged over it (rightmost wins)."""
        d = dict(self._props)
        for o in others:
            d.update(o)
        return Layer(d)

    def select(self, *keys: str) -> Dict[str, Any]:
        """Plain dict restricted to ``keys`` that are present."""
        return {k: self._props[k] for k in keys if k in self._props}

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._props)


# ---------------------------------------------------------------------
# Spec
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class Spec:
    """
    A plot specification: layers plus plot-level properties.

    Parameters
    ----------
    layers : iterable of Mapping
        Layers; plain mappings are converted to :class:`Layer`.
    props : Mapping
        Plot-level properties (``layout``, ``data``, ``width``, ...).

    Notes
    -----
    ``*`` is :func:`~plotalgebra.forms.algebra.cross` and ``+`` is
    :func:`~plotalgebra.forms.algebra.blend`. Both accept a Spec, a Layer,
    or a plain mapping on either side.

    Examples
    --------
    >>> s = Spec([{"columns": ["a"]}], {"width": 400})
    >>> s.layers[0]
    Layer(columns=['a'])
    >>> s.props["width"]
    400
    """

    layers: Tuple[Layer, ...] = ()
    props: Layer = field(default_factory=Layer)

    def __init__(self, layers: Iterable[Mapping] = (), props: Optional[Mapping] = None):
        object.__setattr__(
            self, "layers",
            tuple(l if isinstance(l, Layer) else Layer(l) for l in layers),
        )
        object.__setattr__(
            self, "props",
            props if isinstance(props, Layer) else Layer(props or {}),
        )

    # Sequence-like access to layers
    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    def __getitem__(self, i: int) -> Layer:
        return self.layers[i]

    def __repr__(self) -> str:
        inner = ",\n  ".join(repr(l) for l in self.layers)
        props = ", ".join(f"{k}={_short(v)}" for k, v in self.props.items())
        return f"Spec(props={{{props}}}, layers=[\n  {inner}\n])" if self.layers \
            else f"Spec(props={{{props}}}, layers=[])"

    @property
    def layout(self) -> Optional[str]:
        return self.props.get("layout")

    @property
    def data(self) -> Optional[pd.DataFrame]:
        """Plot-level dataset, if any."""
        return self.props.get("data")

    def with_layers(self, layers: Iterable[Mapping]) -> "Spec":
        return Spec(layers, self.props)

    def with_props(self, **props: Any) -> "Spec":
        return Spec(self.layers, self.props.assoc(**props))

    def map_layers(self, fn: Callable[[Layer], Mapping]) -> "Spec":
        """Apply ``fn`` to every layer, keeping the plot properties."""
        return Spec([fn(l) for l in self.layers], self.props)

    # Algebra
    def __mul__(self, other):
        from .algebra import cross
        return cross(self, to_spec(other))

    def __rmul__(self, other):
        from .algebra import cross
        return cross(to_spec(other), self)

    def __add__(self, other):
        from .algebra import blend
        return blend(self, to_spec(other))

    def __radd__(self, other):
        from .algebra import blend
        return blend(to_spec(other), self)


def to_spec(x: Union[Spec, Mapping, None]) -> Spec:
    """
    Coerce a value into a :class:`Spec`.

    Parameters
    ----------
    x : Spec or Layer or Mapping or None
        A Spec is returned unchanged; a Layer or plain mapping becomes a
        one-layer Spec; ``None`` becomes the empty Spec.

    Raises
    ------
    TypeError
        If ``x`` cannot be converted.

    Examples
    --------
    >>> to_spec({"color": "species"}).layers[0]["color"]
    'species'
    """
    if isinstance(x, Spec):
        return x
    if x is None:
        return Spec()
    if isinstance(x, Mapping):
        return Spec([x])
    raise TypeError(f"Cannot convert {type(x).__name__} to Spec")
