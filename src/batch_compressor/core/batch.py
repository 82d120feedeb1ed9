from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import PurePosixPath
from typing import Callable, Iterable, Sequence

from batch_compressor.core.models import BatchReport, SourceImage, TransformConfig, TransformResult
from batch_compressor.core.naming import derive_output_name
from batch_compressor.core.transformer import ImageTransformer
from batch_compressor.core.validation import validate_config
from batch_compressor.logger import get_logger
from batch_compressor.settings import load_settings

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".gif", ".tif", ".tiff"}
CANCELLED = "cancelled"

ProgressCallback = Callable[[int, int], None]
LogCallback = Callable[[str], None]

log = get_logger("batch")


class BatchProcessor:
    """Runs one ImageTransformer call per source image and collects the results in input order.

    Items may run on a thread pool; results are written at their own index and
    progress is emitted from the calling thread, one tick per item.
    """

    def __init__(self, transformer: ImageTransformer | None = None, max_workers: int | None = None) -> None:
        self.transformer = transformer or ImageTransformer()
        self.max_workers = max_workers if max_workers is not None else load_settings().max_workers
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._active_batch: threading.Event | None = None
        self._lock = threading.Lock()
        self._dispatcher: ThreadPoolExecutor | None = None

    def run(
        self,
        images: Sequence[SourceImage],
        config: TransformConfig,
        on_progress: ProgressCallback | None = None,
        on_log: LogCallback | None = None,
    ) -> BatchReport:
        validate_config(config)
        return self._run(list(images), config, on_progress, on_log)

    def submit(
        self,
        images: Sequence[SourceImage],
        config: TransformConfig,
        on_progress: ProgressCallback | None = None,
        on_log: LogCallback | None = None,
    ) -> Future[BatchReport]:
        validate_config(config)
        if self._dispatcher is None:
            self._dispatcher = ThreadPoolExecutor(max_workers=1, thread_name_prefix="batch-dispatch")
        return self._dispatcher.submit(self._run, list(images), config, on_progress, on_log)

    def cancel(self) -> None:
        """Stop starting items of the batch currently running; queued batches are not affected.

        A submitted batch that has not started yet is withdrawn with ``Future.cancel()``.
        """
        with self._lock:
            if self._active_batch is not None:
                self._active_batch.set()

    def shutdown(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.shutdown(wait=True)
            self._dispatcher = None

    def __enter__(self) -> BatchProcessor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def get_expected_output_names(self, images: Iterable[SourceImage], config: TransformConfig) -> list[str]:
        names: list[str] = []
        for index, image in enumerate(images, start=1):
            names.append(derive_output_name(image.identifier, config.format, index))
        return names

    def _run(
        self,
        images: list[SourceImage],
        config: TransformConfig,
        on_progress: ProgressCallback | None,
        on_log: LogCallback | None,
    ) -> BatchReport:
        total = len(images)
        results: list[TransformResult | None] = [None] * total
        completed = 0
        cancelled = threading.Event()
        with self._lock:
            self._active_batch = cancelled

        def account(index: int, result: TransformResult) -> None:
            nonlocal completed
            results[index] = result
            completed += 1
            if result.success:
                if on_log:
                    on_log(f"[{completed}/{total}] Saved: {result.output_name}")
            else:
                log.warning("Failed: %s (%s)", result.source_name, result.error)
                if on_log:
                    on_log(f"[{completed}/{total}] Failed: {result.source_name} ({result.error})")
            if on_progress:
                on_progress(completed, total)

        try:
            workers = min(self.max_workers, total)
            if workers <= 1:
                for index, image in enumerate(images):
                    account(index, self._process(index, image, config, cancelled))
            else:
                with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="batch") as executor:
                    future_to_index = {
                        executor.submit(self._process, index, image, config, cancelled): index
                        for index, image in enumerate(images)
                    }
                    try:
                        for future in as_completed(future_to_index):
                            account(future_to_index[future], future.result())
                    except BaseException:
                        cancelled.set()
                        executor.shutdown(wait=False, cancel_futures=True)
                        raise
        finally:
            with self._lock:
                if self._active_batch is cancelled:
                    self._active_batch = None

        report = BatchReport(results=tuple(result for result in results if result is not None))
        log.info(
            "Batch finished: %d/%d succeeded, %d bytes -> %d bytes",
            report.succeeded,
            report.total,
            report.input_total_bytes,
            report.output_total_bytes,
        )
        return report

    def _process(
        self,
        index: int,
        image: SourceImage,
        config: TransformConfig,
        cancelled: threading.Event,
    ) -> TransformResult:
        if cancelled.is_set():
            return TransformResult.failed(image.identifier, CANCELLED)

        log.debug("[%d] Processing: %s", index + 1, image.identifier)
        try:
            return self.transformer.transform(image, config, position=index + 1)
        except Exception as error:
            log.exception("Unexpected failure for %s", image.identifier)
            return TransformResult.failed(image.identifier, f"{type(error).__name__}: {error}")


def filter_supported_names(names: Iterable[str]) -> list[str]:
    return [name for name in names if _suffix(name) in SUPPORTED_EXTENSIONS]


def _suffix(name: str) -> str:
    return PurePosixPath(name.replace("\\", "/")).suffix.lower()
