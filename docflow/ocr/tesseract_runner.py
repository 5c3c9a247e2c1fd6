import subprocess
import threading
import time

from docflow.errors import OperationCancelledError
from docflow.logging.logger import Log
from docflow.ocr.exceptions import OcrEngineUnavailableError, OcrGenerationError


class TesseractCliRunner:
    """Runs the tesseract CLI on one page image, piping PNG in and text out.

    Input is written while stdout and stderr are drained together, so large
    outputs cannot fill a pipe and stall the child. The child is polled every
    ``poll_interval`` seconds and killed when shutdown is requested or the
    page takes longer than ``page_timeout`` seconds.
    """

    def __init__(
        self,
        executable: str = "tesseract",
        language: str = "eng",
        dpi: int = 300,
        page_timeout: float = 120,
        poll_interval: float = 0.5,
    ) -> None:
        self._executable = executable
        self._language = language
        self._dpi = dpi
        self._page_timeout = page_timeout
        self._poll_interval = poll_interval

    def build_command(self) -> list[str]:
        return [
            self._executable,
            "stdin",
            "stdout",
            "-l",
            self._language,
            "--dpi",
            str(self._dpi),
        ]

    def run(self, png_bytes: bytes, stop_event: threading.Event) -> str:
        """OCR a single PNG image.

        Raises:
            OcrEngineUnavailableError: if the executable cannot be started.
            OcrGenerationError: on non-zero exit or page timeout.
            OperationCancelledError: if stop_event is set while running.
        """
        command = self.build_command()
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise OcrEngineUnavailableError(
                f"Cannot start OCR engine '{command[0]}': {exc}"
            ) from exc

        deadline = time.monotonic() + self._page_timeout
        pending_input: bytes | None = png_bytes
        with process:
            while True:
                try:
                    stdout, stderr = process.communicate(
                        input=pending_input, timeout=self._poll_interval
                    )
                    break
                except subprocess.TimeoutExpired:
                    # communicate() keeps the remaining input; it must not be passed again
                    pending_input = None
                if stop_event.is_set():
                    self._kill(process)
                    raise OperationCancelledError("OCR cancelled by shutdown request")
                if time.monotonic() >= deadline:
                    self._kill(process)
                    raise OcrGenerationError(
                        f"Tesseract exceeded {self._page_timeout}s on a page and was killed"
                    )

        if process.returncode != 0:
            error_text = stderr.decode("utf-8", errors="replace").strip()
            raise OcrGenerationError(
                f"Tesseract exited with code {process.returncode}: {error_text}"
            )
        return stdout.decode("utf-8", errors="replace")

    @staticmethod
    def _kill(process: subprocess.Popen[bytes]) -> None:
        process.kill()
        try:
            process.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            Log.warning(f"Tesseract process {process.pid} did not exit after kill")
