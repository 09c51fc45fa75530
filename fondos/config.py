# fondos/config.py
from datetime import date
from typing import Dict, List

# Snapshot of the ledger (binary, replaced once per run)
LEDGER_FILE_PATH = "funds.dat"
# Suffix of the temporary file written before the atomic swap
LEDGER_TEMP_SUFFIX = ".new"
# strftime pattern appended to the stem of the previous snapshot
LEDGER_BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"

# Output files
FUND_RETURNS_CSV_PATH = "output/fund_returns.csv"
PERFORMANCE_PDF_PATH = "output/performance_report.pdf"

# Lookback windows (days) for the return engine: week, month, quarter, half year, 1y, 2y, 3y
LOOKBACK_WINDOWS_DAYS: List[int] = [7, 30, 91, 182, 365, 730, 1095]

# Transfers dated on or before this day predate the movements history and are not checked
TRANSFER_CHECK_CUTOVER_DATE: date = date(2021, 6, 1)

# Report markers (lines pasted from the bank portal)
END_OF_INPUT_MARKER = "EOF"
FIELD_SEPARATOR = "\t"

ACCOUNT_STATUS_TABLE_START = "Anual**"
ACCOUNT_STATUS_TABLE_END_PREFIX = "Total\t"
ACCOUNT_STATUS_FOOTER_END = "Aprenda aquí sobre el producto\tAprenda aquí sobre el producto"

MOVEMENTS_TABLE_START_PREFIX = "Fecha\tNombre del multiportafolio\tMovimiento\tTipo Aporte\tValor"
MOVEMENTS_PAGE_END = "que origina esta transacción."

FUND_RETURNS_TABLE_START = "Rentabilidad de los fondos"
FUND_RETURNS_PERIODIC_TABLE_START = "Fondo\tÚltimo día"

# Movement labels and the sign applied to the amount
ACTION_LABEL_SIGNS: Dict[str, int] = {
    "Aporte": 1,
    "Aporte por traslado de otro portafolio": 1,
    "Aporte por traslado a otro portafolio": -1,
    "Retiro parcial": -1,
}

# Two-digit years in report dates are offset by this value
TWO_DIGIT_YEAR_BASE = 2000

# Logging
LOG_LEVEL = "INFO"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
