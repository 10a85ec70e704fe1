"""Log formatting and display helpers."""

import io
import json
import logging
import unittest

from batchmint.util import _HumanFormatter, fmt_amount, init_logging, short


def _record(level=logging.INFO, msg="minted"):
    return logging.LogRecord("batchmint", level, __file__, 1, msg, None, None)


class FormatterTests(unittest.TestCase):
    def test_human_line_has_millisecond_clock(self) -> None:
        line = _HumanFormatter(color=False, debug=False).format(_record())
        self.assertRegex(line, r"^\d{2}:\d{2}:\d{2}\.\d{3}  info minted$")

    def test_human_warning_label(self) -> None:
        line = _HumanFormatter(color=False, debug=False).format(_record(logging.WARNING, "reverted"))
        self.assertTrue(line.endswith(" warn reverted"))

    def test_human_color_wraps_label(self) -> None:
        line = _HumanFormatter(color=True, debug=False).format(_record(logging.ERROR, "boom"))
        self.assertIn("\x1b[38;5;203merror\x1b[0m boom", line)

    def test_json_lines_logger(self) -> None:
        stream = io.StringIO()
        log = init_logging("batchmint.test", level="debug", json_lines=True, stream=stream)
        try:
            log.debug("tx %s", "0xabc")
        finally:
            init_logging()

        payload = json.loads(stream.getvalue())
        self.assertEqual(payload["msg"], "tx 0xabc")
        self.assertEqual(payload["level"], "debug")
        self.assertIsInstance(payload["ts_ms"], int)

    def test_reinit_replaces_handler(self) -> None:
        log = init_logging("batchmint.test2", stream=io.StringIO())
        init_logging("batchmint.test2", stream=io.StringIO())
        self.assertEqual(len(log.handlers), 1)
        init_logging()


class HelperTests(unittest.TestCase):
    def test_short_hash(self) -> None:
        tx = "0x" + "ab" * 32
        self.assertEqual(short(tx), "0xababab…ababab")
        self.assertEqual(short(None), "-")
        self.assertEqual(short("0x1234"), "0x1234")

    def test_fmt_amount(self) -> None:
        self.assertEqual(fmt_amount(10**18), "1")
        self.assertEqual(fmt_amount(1_500_000_000_000_000), "0.0015")
        self.assertEqual(fmt_amount(1_500_000, 9), "0.0015")
        self.assertEqual(fmt_amount(42, 0), "42")


if __name__ == "__main__":
    unittest.main()
