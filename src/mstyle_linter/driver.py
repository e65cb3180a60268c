import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from .engine import UNREADABLE, LinterEngine, io_violation
from .models import FileReport
from .reporter import Report, Reporter
from .settings import LintSettings
from .traversal import DEFAULT_IGNORE_DIRS, find_source_files, is_test_file

logger = logging.getLogger(__name__)


class LintDriver:
    """Discovers files, checks them concurrently and merges the results"""

    def __init__(self, settings: LintSettings | None = None, engine: LinterEngine | None = None):
        self.settings = settings or (engine.settings if engine is not None else LintSettings())
        self.engine = engine or LinterEngine(self.settings)

    def discover(self, paths: Iterable[Path]) -> tuple[list[Path], list[FileReport]]:
        """Expand directories into source files; missing paths become ``io.unreadable`` reports"""
        ignore = DEFAULT_IGNORE_DIRS | set(self.settings.exclude)
        files: list[Path] = []
        missing: list[FileReport] = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                files.extend(find_source_files(path, self.settings.extension, ignore))
            elif path.exists():
                files.append(path)
            else:
                logger.warning("Path does not exist: %s", path)
                missing.append(
                    FileReport(
                        path=str(path),
                        violations=(io_violation(str(path), UNREADABLE, "No such file or directory"),),
                    )
                )

        # the same file given twice is checked once
        unique = list(dict.fromkeys(files))
        logger.debug("Discovered %d file(s)", len(unique))
        return unique, missing

    def run(self, paths: Iterable[Path]) -> Report:
        files, missing = self.discover(paths)
        reporter = Reporter()
        for report in missing:
            reporter.add(report)

        prefix = self.settings.test_prefix
        with ThreadPoolExecutor(max_workers=self.settings.jobs) as pool:
            results = pool.map(lambda f: self.engine.analyze_file(f, is_test_file(f, prefix)), files)
            for report in results:
                reporter.add(report)
        return reporter.build()
