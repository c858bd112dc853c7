"""Data loading module for the housing log-price analysis."""

import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from src.errors import SchemaMismatchError

logger = logging.getLogger(__name__)

_EXCEL_SUFFIXES = {".xlsx"}


def validate_schema(frames: Sequence[pd.DataFrame], names: Sequence[str]) -> None:
    """Assert that every frame shares the first frame's column layout.

    Args:
        frames: DataFrames about to be concatenated.
        names: Labels (usually file paths) used in error messages.

    Raises:
        SchemaMismatchError: If column names or their order differ.
    """
    reference = list(frames[0].columns)
    for frame, name in zip(frames[1:], names[1:]):
        columns = list(frame.columns)
        if columns == reference:
            for col in reference:
                if frame[col].dtype != frames[0][col].dtype:
                    logger.warning(
                        "Column '%s' dtype differs in %s: %s vs %s",
                        col,
                        name,
                        frame[col].dtype,
                        frames[0][col].dtype,
                    )
            continue

        missing = [c for c in reference if c not in columns]
        extra = [c for c in columns if c not in reference]
        if missing or extra:
            detail = f"missing={missing}, extra={extra}"
        else:
            detail = f"column order differs: {columns}"
        msg = f"Schema of '{name}' does not match '{names[0]}' ({detail})."
        logger.error(msg)
        raise SchemaMismatchError(msg)

    logger.info("Schema validation passed for %d files.", len(frames))


class DataIngestor:
    """Loads and concatenates the housing tables.

    Args:
        file_paths: Paths to the tables, all with the same column layout.
            Falls back to the ``DATA_PATHS`` env var (``os.pathsep``
            separated) when not provided.
    """

    def __init__(self, file_paths: Optional[Sequence[Union[str, Path]]] = None) -> None:
        if file_paths is None:
            env = os.getenv("DATA_PATHS", "")
            file_paths = [p for p in env.split(os.pathsep) if p]
        self.file_paths: List[Path] = [Path(p) for p in file_paths]

    def read_table(self, path: Path) -> pd.DataFrame:
        """Read a single CSV or Excel file.

        Raises:
            FileNotFoundError: If the file path does not exist.
            ValueError: If the suffix is unsupported or the table is empty.
        """
        if not path.exists():
            msg = f"File not found: {path}"
            logger.error(msg)
            raise FileNotFoundError(msg)

        suffix = path.suffix.lower()
        if suffix == ".csv":
            df = pd.read_csv(path)
        elif suffix in _EXCEL_SUFFIXES:
            df = pd.read_excel(path, engine="openpyxl")
        else:
            raise ValueError(f"Unsupported file type '{suffix}' for {path}.")

        if df.empty:
            raise ValueError(f"Loaded DataFrame from '{path}' is empty.")

        logger.info("Loaded %d rows and %d columns from %s.", *df.shape, path)
        return df

    def load_tables(self) -> pd.DataFrame:
        """Load every file, validate the shared schema and append the rows.

        Returns:
            Concatenated DataFrame in file order with a fresh ``RangeIndex``.

        Raises:
            ValueError: If no file paths were configured.
            SchemaMismatchError: If the files disagree on their columns.
        """
        if not self.file_paths:
            raise ValueError("No data files configured.")

        frames = [self.read_table(path) for path in self.file_paths]
        validate_schema(frames, [str(p) for p in self.file_paths])

        df = pd.concat(frames, axis=0, ignore_index=True)
        logger.info("Concatenated dataset: %d rows × %d columns.", *df.shape)
        return df
