"""Plot job pipeline."""

from .orchestrator import PlotOrchestrator, PipelineStatus, plot
from .plot_context import PlotContext
from .workers import CellRenderTask, render_cell

__all__ = [
    'PlotOrchestrator',
    'PipelineStatus',
    'plot',
    'PlotContext',
    'CellRenderTask',
    'render_cell',
]
