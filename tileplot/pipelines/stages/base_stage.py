# tileplot/pipelines/stages/base_stage.py
"""Base class for plot pipeline stages."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from enum import Enum
from dataclasses import dataclass, field


class StageStatus(Enum):
    """Stage execution status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class StageResult:
    """Result from stage execution."""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    metrics: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    execution_time: float = 0.0


class PipelineStage(ABC):
    """
    Abstract base class for plot pipeline stages.

    Stages run in a fixed order and communicate only through the shared
    PlotContext; each one reads what earlier stages produced and records
    its own outputs there.
    """

    def __init__(self):
        self.status = StageStatus.PENDING
        self.error: Optional[str] = None
        self.result: Optional[StageResult] = None
        self._cancel_requested = False

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this stage."""
        pass

    @abstractmethod
    def execute(self, context) -> StageResult:
        """
        Execute the stage.

        Args:
            context: PlotContext with shared job state

        Returns:
            StageResult with outputs and metrics
        """
        pass

    def cancel(self):
        """Request cancellation of stage execution."""
        self._cancel_requested = True

    def is_cancelled(self) -> bool:
        return self._cancel_requested

    def reset(self):
        self.status = StageStatus.PENDING
        self.error = None
        self.result = None
        self._cancel_requested = False
