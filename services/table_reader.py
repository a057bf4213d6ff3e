import logging
import zipfile
from pathlib import Path
from typing import IO, Any, Dict, List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")

Source = Union[str, Path, IO[bytes]]


class TableReadError(ValueError):
    pass


def _extension(source: Source, filename: Optional[str]) -> str:
    name = filename or getattr(source, "name", None) or (str(source) if isinstance(source, (str, Path)) else "")
    return Path(name).suffix.lower()


def read_frame(source: Source, filename: Optional[str] = None) -> pd.DataFrame:
    ext = _extension(source, filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise TableReadError(f"Unsupported file type {ext or '(none)'!r}. Upload a CSV or Excel (.xlsx) file.")

    try:
        if ext == ".csv":
            df = pd.read_csv(source, dtype=object, keep_default_na=False, skipinitialspace=True)
        else:
            df = pd.read_excel(source, sheet_name=0, dtype=object)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    except FileNotFoundError:
        raise
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        raise TableReadError("Failed to parse file. Ensure it's a valid CSV or Excel.") from e

    # blank cells come through as "" rather than NaN
    df = df.astype(object).where(df.notna(), "")
    df.columns = [str(c) for c in df.columns]
    return df


def read_table(source: Source, filename: Optional[str] = None) -> List[Dict[str, Any]]:
    """Read the first sheet of a CSV/XLSX upload into a list of row dicts.

    Column order is preserved; the first column is the alternative label.
    """
    df = read_frame(source, filename)
    rows = df.to_dict(orient="records")
    logger.info("Read %d row(s) x %d column(s) from %s", len(rows), len(df.columns), filename or getattr(source, "name", source))
    return rows
