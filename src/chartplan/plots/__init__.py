"""Built-in plot types, registered on import."""

from chartplan.plots.bar import BAR
from chartplan.plots.column import COLUMN
from chartplan.plots.scatter import SCATTER
from chartplan.registry import register_plot_type

BUILTIN_PLOT_TYPES = (COLUMN, SCATTER, BAR)

for _plot_type in BUILTIN_PLOT_TYPES:
    _plot_type.geometry_map.validate()
    register_plot_type(_plot_type.name, _plot_type)

del _plot_type

__all__ = ["BAR", "BUILTIN_PLOT_TYPES", "COLUMN", "SCATTER"]
