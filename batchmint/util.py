# batchmint/util.py
import json
import logging
import sys
import time

from .config import LOG_LEVEL, LOG_COLOR, LOG_JSON, DEBUG

RESET = "\x1b[0m"
COLORS = {
    "DEBUG": "\x1b[38;5;245m",
    "INFO":  "\x1b[38;5;39m",
    "WARNING": "\x1b[38;5;214m",
    "ERROR": "\x1b[38;5;203m",
}
LABELS = {"WARNING": "warn", "CRITICAL": "crit"}


def _clock(record: logging.LogRecord) -> str:
    # millisecond wall clock, the trigger fires on a unix-ms target
    return time.strftime("%H:%M:%S", time.localtime(record.created)) + f".{int(record.msecs):03d}"


class _HumanFormatter(logging.Formatter):
    def __init__(self, color: bool = LOG_COLOR, debug: bool = DEBUG):
        super().__init__()
        self.color = color
        self.debug = debug

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        msg = record.getMessage()
        if self.debug and record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"
        label = LABELS.get(level, level.lower())
        if self.color:
            return f"{_clock(record)} {COLORS.get(level, '')}{label:>5}{RESET} {msg}"
        return f"{_clock(record)} {label:>5} {msg}"


class _JsonFormatter(logging.Formatter):
    def __init__(self, debug: bool = DEBUG):
        super().__init__()
        self.debug = debug

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts_ms": int(record.created * 1000),
            "level": record.levelname.lower(),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if self.debug and record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


_log = None

def get_logger(name="batchmint"):
    global _log
    return _log if _log else init_logging(name)

def init_logging(name="batchmint", level: str = LOG_LEVEL, json_lines: bool = LOG_JSON, stream=None):
    """Single stdout handler for the package logger; calling again replaces it."""
    global _log
    lvl = getattr(logging, level.upper(), logging.INFO)
    log = logging.getLogger(name)
    log.setLevel(lvl)
    h = logging.StreamHandler(stream or sys.stdout)
    h.setLevel(lvl)
    h.setFormatter(_JsonFormatter() if json_lines else _HumanFormatter())
    log.handlers[:] = [h]
    log.propagate = False
    _log = log
    return log

# --- pretty helpers ---
def short(x: object, keep: int = 6) -> str:
    if x is None:
        return "-"
    s = str(x)
    if s.startswith("0x") and len(s) > 2*keep+2:
        return f"{s[:2+keep]}…{s[-keep:]}"
    if len(s) > keep*2:
        return f"{s[:keep]}…{s[-keep:]}"
    return s

def fmt_amount(raw_amount: int, decimals: int = 18) -> str:
    if decimals <= 0:
        return str(raw_amount)
    q = 10 ** decimals
    whole = raw_amount // q
    frac = raw_amount % q
    if frac == 0:
        return f"{whole}"
    # trim trailing zeros, limit length
    s = f"{frac:0{decimals}d}".rstrip("0")
    s = s[:8]  # keep short
    return f"{whole}.{s}"

def on_error(log, msg: str, exc: Exception = None):
    if DEBUG and exc:
        log.exception(msg)
    else:
        log.error(f"{msg}: {exc}" if exc else msg)

def batch_mint_abi():
    # quoteBatchMint (view) + batchMint (payable)
    return [
      {"name":"quoteBatchMint","type":"function","stateMutability":"view",
       "inputs":[{"name":"mintId","type":"uint256"},{"name":"amount","type":"uint256"}],
       "outputs":[{"name":"totalCostWithFee","type":"uint256"},{"name":"feeAmount","type":"uint256"}]},
      {"name":"batchMint","type":"function","stateMutability":"payable",
       "inputs":[{"name":"amount","type":"uint256"},{"name":"mintId","type":"uint256"}],
       "outputs":[{"name":"totalCostWithFee","type":"uint256"}]},
    ]
