# tileplot/pipelines/stages/render_stage.py
"""Render tiles, either in one local pass or one task per grid cell."""

import threading
from concurrent.futures import Future, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from typing import Dict, List, Tuple

from ...abstractions.types import ProcessingStatus, RenderMode
from ...exceptions import PlotCancelledError, PlotError, TileRenderError
from ...infrastructure.logging import get_logger, log_stage
from ...rendering.tile_rasterizer import Tile, TileRasterizer
from ..workers import CellRenderTask, render_cell
from .base_stage import PipelineStage, StageResult

logger = get_logger(__name__)

PROGRESS_LOG_INTERVAL = 10


class RenderStage(PipelineStage):
    """Produce exactly one tile per grid cell (one tile in local mode)."""

    def __init__(self):
        super().__init__()
        self._futures: List[Future] = []
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "render"

    def cancel(self):
        super().cancel()
        with self._lock:
            for future in self._futures:
                future.cancel()

    @log_stage("render")
    def execute(self, context) -> StageResult:
        if context.mode is RenderMode.DISTRIBUTED:
            tiles = self._render_distributed(context)
        else:
            tiles = [self._render_local(context)]
        context.tiles = tiles

        shapes = sum(t.shape_count for t in tiles)
        return StageResult(success=True, metrics={'tiles': len(tiles), 'shapes': shapes})

    def _render_local(self, context) -> Tile:
        progress = context.progress((0, 0))
        progress.mark_started()
        rasterizer = TileRasterizer(context.transform, context.style)
        shapes = context.source.iter_shapes(context.config.plot_range)
        try:
            with context.logging_context.operation('local_pass'):
                tile = rasterizer.rasterize_all(shapes, cancel_event=context.cancel_event)
        except Exception as e:
            progress.mark_failed(e)
            raise
        progress.mark_completed(tile.shape_count)
        return tile

    def _tasks(self, context) -> List[CellRenderTask]:
        return [
            CellRenderTask(
                source=context.source,
                grid=context.grid,
                col=cell.col,
                row=cell.row,
                transform=context.transform,
                style=context.style,
                plot_range=context.config.plot_range,
                margin=context.get('margin', 0.0),
            )
            for cell in context.grid.cells()
        ]

    def _render_distributed(self, context) -> List[Tile]:
        config = context.config
        tasks = self._tasks(context)
        use_threads = config.executor == 'thread'
        executor_cls = ThreadPoolExecutor if use_threads else ProcessPoolExecutor
        workers = max(1, min(config.max_workers, len(tasks)))
        logger.info(f"Rendering {len(tasks)} cells with {workers} {config.executor} workers")

        tiles: List[Tile] = []
        with context.logging_context.operation('cell_pool', cells=len(tasks), workers=workers), \
                executor_cls(max_workers=workers) as executor:
            futures: Dict[Future, Tuple[int, int]] = {}
            for task in tasks:
                context.progress(task.cell).mark_started()
                if use_threads:
                    future = executor.submit(render_cell, task, context.cancel_event)
                else:
                    future = executor.submit(render_cell, task)
                futures[future] = task.cell
            with self._lock:
                self._futures = list(futures)

            try:
                for future in as_completed(futures):
                    if context.cancel_event.is_set() or self.is_cancelled():
                        raise PlotCancelledError("Plot cancelled while rendering tiles")
                    cell = futures[future]
                    try:
                        tile = future.result()
                    except PlotError as e:
                        context.progress(cell).mark_failed(e)
                        raise
                    except Exception as e:
                        context.progress(cell).mark_failed(e)
                        raise TileRenderError(cell, e) from e

                    context.progress(cell).mark_completed(tile.shape_count)
                    tiles.append(tile)
                    if len(tiles) % PROGRESS_LOG_INTERVAL == 0 or len(tiles) == len(tasks):
                        context.logging_context.log_progress(len(tiles), len(tasks), "tiles rendered")
            except BaseException:
                for pending, cell in futures.items():
                    if pending.cancel():
                        context.progress(cell).status = ProcessingStatus.CANCELLED
                raise
            finally:
                with self._lock:
                    self._futures = []

        return tiles
