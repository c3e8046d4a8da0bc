import io
import logging
import re

import pandas as pd

from smartkollect.errors import ValidationError

logger = logging.getLogger(__name__)

# Header spellings seen in client exports, compared after lower/strip
ACCOUNT_NUMBER_COLUMNS = ("acc_number", "account_number", "account number", "accountnumber", "acc no", "account no")

# openpyxl reads OOXML workbooks only, legacy BIFF .xls needs xlrd
EXCEL_ENGINES = {"xlsx": "openpyxl", "xls": "xlrd"}

_SEPARATORS = re.compile(r"[\n,;\s]+")


def parse_account_numbers_text(text: str):
    """Split pasted text on newlines, commas, semicolons or whitespace."""
    return [part.strip() for part in _SEPARATORS.split(text or "") if part.strip()]


def _read_frame(file_contents: bytes, filename: str) -> pd.DataFrame:
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    # dtype=str keeps leading zeros that numeric parsing would drop
    if extension == "csv":
        return pd.read_csv(io.BytesIO(file_contents), dtype=str, keep_default_na=False)
    if extension in EXCEL_ENGINES:
        return pd.read_excel(
            io.BytesIO(file_contents), engine=EXCEL_ENGINES[extension], dtype=str, keep_default_na=False
        )
    raise ValidationError(f"Unsupported file type: {extension or filename}")


def read_account_numbers_file(file_contents: bytes, filename: str):
    """
    Reads an uploaded CSV/Excel sheet and returns its account numbers in file order.
    Uses the account-number column when one is recognised, else the first column.
    """
    try:
        df = _read_frame(file_contents, filename)
    except ValidationError:
        raise
    except Exception as e:
        logger.error(f"[INGESTION] Could not parse {filename}: {e}")
        raise ValidationError("Could not read account numbers from file") from e

    if df.empty or len(df.columns) == 0:
        raise ValidationError("Could not read account numbers from file")

    # Standardize Columns (Lowercase, strip spaces)
    columns = {str(c).lower().strip(): c for c in df.columns}
    column = next((columns[name] for name in ACCOUNT_NUMBER_COLUMNS if name in columns), df.columns[0])

    numbers = [str(value).strip() for value in df[column].tolist()]
    numbers = [n for n in numbers if n]
    logger.info(f"[INGESTION] Read {len(numbers)} account numbers from column '{column}' of {filename}")
    return numbers
