from .component import Component, Simplification  # noqa: F401
from .element import Element  # noqa: F401
