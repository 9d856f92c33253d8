"""Plot pipeline stages, in execution order."""

from .base_stage import PipelineStage, StageResult, StageStatus
from .validate_stage import ValidateStage
from .discovery_stage import DiscoveryStage
from .layout_stage import LayoutStage, choose_render_mode
from .render_stage import RenderStage
from .commit_stage import CommitStage

__all__ = [
    'PipelineStage',
    'StageResult',
    'StageStatus',
    'ValidateStage',
    'DiscoveryStage',
    'LayoutStage',
    'choose_render_mode',
    'RenderStage',
    'CommitStage',
]
