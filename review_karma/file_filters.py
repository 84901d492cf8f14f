"""File filtering utilities for excluding lock files and generated artifacts from PR size."""

import fnmatch
import logging
from typing import Iterable, List

from .models import FileChange


# Default patterns for files whose additions say nothing about review effort
DEFAULT_EXCLUDED_FILE_PATTERNS = [
    'package-lock.json',
    'npm-shrinkwrap.json',
    'yarn.lock',
    'yarn-error.log',
    'pnpm-lock.yaml',
    'Gemfile.lock',
    'Cargo.lock',
    'composer.lock',
    'poetry.lock',
    'Pipfile.lock',
    '*.min.js',
    '*.min.css',
    '*.bundle.js',
    '*.generated.*',
    'dist/*',
]


class FileFilter:
    """Decides which changed files count toward a pull request's change size."""

    def __init__(self, excluded_file_patterns: List[str] = None):
        """Initialize the file filter.

        Args:
            excluded_file_patterns: List of file patterns to exclude (uses default if None)
        """
        if excluded_file_patterns is None:
            excluded_file_patterns = DEFAULT_EXCLUDED_FILE_PATTERNS
        self.excluded_file_patterns = list(excluded_file_patterns)

    def is_excluded(self, filename: str) -> bool:
        """Check if a file should be excluded based on patterns.

        Patterns are matched against the full path and against the base name,
        so ``yarn.lock`` also excludes ``web/yarn.lock``.

        Args:
            filename: The path of the changed file

        Returns:
            True if the file should be excluded, False otherwise
        """
        basename = filename.rsplit('/', 1)[-1]
        return any(
            fnmatch.fnmatch(filename, pattern) or fnmatch.fnmatch(basename, pattern)
            for pattern in self.excluded_file_patterns
        )

    def change_size(self, files: Iterable[FileChange]) -> int:
        """Sum the additions of every file that is not excluded.

        Args:
            files: Changed files of one pull request

        Returns:
            Number of added lines that count toward karma
        """
        total = 0
        excluded_additions = 0
        excluded_count = 0

        for file in files:
            if self.is_excluded(file.filename):
                excluded_count += 1
                excluded_additions += file.additions
                logging.debug(f"Excluding file: {file.filename} (+{file.additions})")
            else:
                total += file.additions

        if excluded_count > 0:
            logging.debug(f"Excluded {excluded_count} generated file(s) (+{excluded_additions:,} lines)")

        return total
