import threading
from collections.abc import Callable
from datetime import datetime, timedelta

from docflow.batch.access_import import AccessLogImporter
from docflow.config.settings import Settings
from docflow.logging.logger import Log


class BatchWorker:
    """Schedule loop: sleep until the configured hour -> import -> repeat."""

    def __init__(
        self,
        importer: AccessLogImporter,
        settings: Settings,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._importer = importer
        self._run_hour = settings.batch_run_hour
        self._clock = clock

    def next_run(self, now: datetime) -> datetime:
        """Next occurrence of ``run_hour:00`` strictly after ``now``."""
        candidate = now.replace(hour=self._run_hour, minute=0, second=0, microsecond=0)
        if now >= candidate:
            candidate += timedelta(days=1)
        return candidate

    def run(self, stop_event: threading.Event, max_runs: int | None = None) -> None:
        """Run the import once per day until stop_event is set.

        If max_runs is set, stop after that many imports (for testing).
        """
        Log.info(f"Batch worker started, importing daily at {self._run_hour:02d}:00")
        runs = 0
        try:
            while not stop_event.is_set():
                if max_runs is not None and runs >= max_runs:
                    break
                now = self._clock()
                next_run = self.next_run(now)
                delay = (next_run - now).total_seconds()
                Log.info(f"Next batch run scheduled for {next_run:%Y-%m-%d %H:%M} (in {delay:.0f}s)")
                if stop_event.wait(delay):
                    break
                try:
                    self._importer.import_directory()
                except Exception as exc:
                    Log.error(f"Batch import failed: {exc}")
                runs += 1
        except KeyboardInterrupt:
            Log.info("Batch worker interrupted")
        Log.info("Batch worker shutting down gracefully")
