from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor, wait
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from ..config import MatchSettings
from ..exceptions import ConfigurationError, MatchCancelledError
from ..io.image_loader import PathLike, load_rgba
from ..io.template_loader import load_templates
from ..io.visualize import draw_matches
from ..models import MatchOutputSet, MatchResult, SearchZone, Template, TemplateFailure, freeze
from .engine import TemplateSearchEngine, validate_zone

logger = logging.getLogger(__name__)


class TemplateMatchOrchestrator:
    """
    Runs one search per template concurrently against a shared source image.

    Two pools are used: the template pool runs one task per template and the
    window pool scores origin chunks for every template. Template tasks only
    ever wait on the window pool, and window tasks never wait, so the nested
    fan-out cannot starve itself.

    Each template owns a pre-allocated slot in the output, indexed by
    submission order, so completing tasks never contend on shared state.
    """

    def __init__(self, settings: Optional[MatchSettings] = None) -> None:
        self.settings = settings or MatchSettings()

    def run(
        self,
        source: np.ndarray,
        templates: Sequence[Template],
        zone: Optional[SearchZone] = None,
        debug: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> MatchOutputSet:
        """
        Search every template and log a report when ``debug`` is set.
        """
        output = self.match_all(source, templates, zone, record_timings=debug, cancel_event=cancel_event)
        if debug:
            report(output)
        return output

    def match_all(
        self,
        source: np.ndarray,
        templates: Sequence[Template],
        zone: Optional[SearchZone] = None,
        record_timings: bool = False,
        cancel_event: Optional[threading.Event] = None,
    ) -> MatchOutputSet:
        try:
            source = freeze(source)
        except ValueError as exc:
            raise ConfigurationError(f"source image is not usable: {exc}") from exc
        if zone is None:
            zone = SearchZone.full(source)
        validate_zone(source, zone)

        slots: List[MatchResult] = [MatchResult(name=template.name) for template in templates]
        errors: List[Optional[TemplateFailure]] = [None] * len(templates)

        start = time.perf_counter()
        with ThreadPoolExecutor(
            max_workers=self.settings.resolved_window_workers,
            thread_name_prefix="tolmatch-window",
        ) as window_pool:
            engine = TemplateSearchEngine(executor=window_pool, chunk_size=self.settings.chunk_size)

            def task(index: int) -> None:
                template = templates[index]
                task_start = time.perf_counter()
                try:
                    origins = engine.search(
                        source,
                        template.image,
                        template.tolerance,
                        template.percentage,
                        zone,
                        cancel_event,
                    )
                except MatchCancelledError:
                    raise
                except Exception as exc:
                    logger.exception("Search failed for template %s", template.name)
                    errors[index] = TemplateFailure(name=template.name, error=exc, path=template.path)
                    return
                slots[index].origins = origins
                if record_timings:
                    slots[index].elapsed = time.perf_counter() - task_start

            with ThreadPoolExecutor(
                max_workers=self.settings.template_workers,
                thread_name_prefix="tolmatch-template",
            ) as template_pool:
                self._run_tasks(template_pool, task, len(templates))

        elapsed = time.perf_counter() - start

        output = MatchOutputSet(
            results=slots,
            failures=[failure for failure in errors if failure is not None],
            elapsed=elapsed,
        )
        logger.debug("matched %d templates in %.6f seconds", len(templates), elapsed)
        return output

    @staticmethod
    def _run_tasks(executor: Executor, task, count: int) -> None:
        futures = [executor.submit(task, index) for index in range(count)]
        wait(futures)
        for future in futures:
            future.result()


def report(output: MatchOutputSet) -> None:
    logger.info("Time taken to match templates: %.6f seconds", output.elapsed)
    for index, result in enumerate(output.results):
        if result.elapsed is not None:
            logger.info("Template %s (%s) searched in %.6f seconds", index + 1, result.name, result.elapsed)
        logger.info("Template %s found at coordinates: %s", index + 1, result.origins)
    for failure in output.failures:
        logger.warning("Template %s failed: %s", failure.name, failure.error)


def get_template_matches(
    source_path: PathLike,
    template_dir: PathLike,
    debug: bool = False,
    zone: Optional[SearchZone] = None,
    settings: Optional[MatchSettings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> MatchOutputSet:
    """
    Match every template under ``template_dir`` against the image at ``source_path``.

    Result slots follow the file-name order of the template directory. A
    template that could not be decoded keeps an empty slot and is listed in
    ``failures``. With ``debug`` enabled timings are logged and an annotated
    copy of the source is written to ``settings.output_path``.
    """
    settings = settings or MatchSettings()
    source_file = Path(source_path)
    template_root = Path(template_dir)
    if not source_file.exists():
        raise ConfigurationError(f"Source image not found: {source_file}")
    if not template_root.exists():
        raise ConfigurationError(f"Template directory not found: {template_root}")

    start = time.perf_counter()
    source = load_rgba(source_file)
    if zone is not None:
        validate_zone(source, zone)

    templates, load_failures = load_templates(
        template_root,
        settings.extensions,
        settings.tolerance,
        settings.percentage,
    )
    for template in templates:
        logger.debug("%s - %dx%d", template.name, template.width, template.height)

    orchestrator = TemplateMatchOrchestrator(settings)
    searched = orchestrator.match_all(
        source,
        templates,
        zone,
        record_timings=debug,
        cancel_event=cancel_event,
    )

    by_path = {template.path: result for template, result in zip(templates, searched.results)}
    for failure in load_failures:
        by_path[failure.path] = MatchResult(name=failure.name)

    output = MatchOutputSet(
        results=[by_path[path] for path in sorted(by_path)],
        failures=load_failures + searched.failures,
        elapsed=time.perf_counter() - start,
    )

    if debug:
        report(output)
        draw_matches(output, source_file, settings.output_path, settings.box_size)
    return output
