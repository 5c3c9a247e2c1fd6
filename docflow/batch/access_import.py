import shutil
import uuid
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from docflow.config.settings import Settings
from docflow.database.repositories.document_repository import DocumentRepository
from docflow.logging.logger import Log


@dataclass
class ImportReport:
    """Counters for one import run."""

    files: int = 0
    failed_files: int = 0
    updated: int = 0
    skipped: int = 0
    missing: int = 0


class AccessLogImporter:
    """Imports access-count XML files and archives them.

    Expected format::

        <AccessLog>
          <Entry><DocumentId>1</DocumentId><AccessCount>5</AccessCount></Entry>
        </AccessLog>
    """

    def __init__(self, document_repo: DocumentRepository, settings: Settings) -> None:
        self._document_repo = document_repo
        self._input_path = Path(settings.batch_input_path)
        self._archive_path = Path(settings.batch_archive_path)

    def import_directory(self) -> ImportReport:
        """Process every ``*.xml`` file in the input directory."""
        self._input_path.mkdir(parents=True, exist_ok=True)
        self._archive_path.mkdir(parents=True, exist_ok=True)

        report = ImportReport()
        files = sorted(self._input_path.glob("*.xml"))
        if not files:
            Log.info(f"No access log files found in {self._input_path}")
            return report

        Log.info(f"Importing {len(files)} access log files from {self._input_path}")
        for path in files:
            report.files += 1
            success = self._import_file(path, report)
            if not success:
                report.failed_files += 1
            self._archive(path, success)
        Log.info(
            f"Access log import finished: {report.updated} updated, "
            f"{report.skipped} skipped, {report.missing} unknown documents, "
            f"{report.failed_files}/{report.files} files failed"
        )
        return report

    def _import_file(self, path: Path, report: ImportReport) -> bool:
        """Apply every valid entry of one file in a single transaction."""
        Log.info(f"Processing access log file {path.name}")
        try:
            root = ET.parse(path).getroot()
        except ET.ParseError as exc:
            Log.error(f"Invalid XML in {path.name}: {exc}")
            return False
        except OSError as exc:
            Log.error(f"Cannot read {path.name}: {exc}")
            return False

        entries = list(root.iter("Entry"))
        if not entries:
            Log.warning(f"{path.name} contains no Entry elements")

        counts: list[tuple[int, int]] = []
        skipped = 0
        for entry in entries:
            parsed = self._parse_entry(path, entry)
            if parsed is None:
                skipped += 1
            else:
                counts.append(parsed)

        try:
            missing = self._document_repo.apply_access_counts(counts) if counts else []
        except Exception as exc:
            Log.error(f"Failed to process {path.name}, no counts applied: {exc}")
            return False

        for document_id in missing:
            Log.warning(f"Document {document_id} not found")
        report.skipped += skipped
        report.missing += len(missing)
        report.updated += len(counts) - len(missing)
        Log.info(f"{path.name}: {len(counts) - len(missing)} access counts applied")
        return True

    @staticmethod
    def _parse_entry(path: Path, entry: ET.Element) -> tuple[int, int] | None:
        id_text = entry.findtext("DocumentId")
        count_text = entry.findtext("AccessCount")
        if id_text is None or count_text is None:
            Log.warning(f"Skipping entry in {path.name}: missing DocumentId or AccessCount")
            return None
        try:
            return int(id_text.strip()), int(count_text.strip())
        except ValueError:
            Log.warning(f"Skipping entry in {path.name}: non-integer values")
            return None

    def _archive(self, path: Path, success: bool) -> Path:
        """Move a processed file to the archive, suffixed ``.err`` on failure."""
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        name = f"{timestamp}_{uuid.uuid4().hex[:8]}_{path.name}"
        if not success:
            name += ".err"
        destination = self._archive_path / name
        shutil.move(str(path), destination)
        if success:
            Log.info(f"Archived {path.name} to {destination}")
        else:
            Log.warning(f"Moved failed file {path.name} to {destination}")
        return destination
