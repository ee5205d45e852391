"""JsonFileRunSink — writes each run record to ``<output_dir>/<run_id>.json``."""

import os
from pathlib import Path

from ze_bench.evaluation.domain.run_record import RunRecord
from ze_bench.evaluation.infrastructure.errors import RunPersistenceError


class JsonFileRunSink:
    """Stores run records as pretty-printed JSON files, one per run.

    Each save replaces the previous file for the same run atomically, so a
    reader never sees a half-written record.
    """

    def __init__(self, output_dir: Path) -> None:
        self._output_dir = output_dir

    def save(self, record: RunRecord) -> str:
        """Write *record* and return the path it was written to.

        Raises:
            RunPersistenceError: if the directory or file cannot be written.
        """
        target = self._output_dir / f"{record.run_id}.json"
        staging = target.with_suffix(".json.tmp")
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            staging.write_text(record.model_dump_json(indent=2), encoding="utf-8")
            os.replace(staging, target)
        except OSError as exc:
            raise RunPersistenceError(run_id=record.run_id, reason=str(exc)) from exc
        return str(target)
