import logging
import os
import unittest

from navdeck.bus import _debug_sink, _warn_sink, log
from navdeck.config import config
from navdeck.logging_adapter import (
    _HANDLER_MARK, format_line, normalize_record, setup_navdeck_logging, should_emit_level,
)


class TestLoggingAdapter(unittest.TestCase):
    def test_normalize_and_format(self):
        record = normalize_record(
            {"level": "warning", "source": "navdeck.tabs", "message": "nothing to close", "kind": "nothing_to_close"},
            default_level="INFO",
            default_source="navdeck",
        )
        line = format_line(record)
        self.assertIn("[WARNING][navdeck.tabs] nothing to close", line)
        self.assertIn('"kind":"nothing_to_close"', line)

    def test_normalize_exception(self):
        record = normalize_record(ValueError("bad key"))
        self.assertEqual(record["level"], "ERROR")
        self.assertEqual(record["message"], "ValueError: bad key")

    def test_setup_installs_handler_once(self):
        logger = setup_navdeck_logging()
        setup_navdeck_logging()
        self.assertEqual(logger.name, "navdeck")
        own = [h for h in logger.handlers if getattr(h, _HANDLER_MARK, False)]
        self.assertEqual(len(own), 1)
        self.assertFalse(logger.propagate)

    def test_level_filtering(self):
        old = os.environ.get("NAVDECK_LOG_LEVEL")
        try:
            os.environ["NAVDECK_LOG_LEVEL"] = "WARNING"
            self.assertFalse(should_emit_level("INFO"))
            self.assertTrue(should_emit_level("WARNING"))
            self.assertTrue(should_emit_level("ERROR"))
        finally:
            if old is None:
                os.environ.pop("NAVDECK_LOG_LEVEL", None)
            else:
                os.environ["NAVDECK_LOG_LEVEL"] = old

    def test_level_follows_runtime_config(self):
        old = os.environ.pop("NAVDECK_LOG_LEVEL", None)
        try:
            config.set("log.level", "ERROR")
            self.assertFalse(should_emit_level("WARNING"))
            self.assertTrue(should_emit_level("CRITICAL"))
            self.assertEqual(setup_navdeck_logging().level, logging.ERROR)
            config.set("log.level", "debug")
            self.assertTrue(should_emit_level("DEBUG"))
        finally:
            config.delete("log.level")
            setup_navdeck_logging()
            if old is not None:
                os.environ["NAVDECK_LOG_LEVEL"] = old

    def test_unknown_level_names_count_as_info(self):
        old = os.environ.pop("NAVDECK_LOG_LEVEL", None)
        try:
            self.assertTrue(should_emit_level("chatty"))
            self.assertFalse(should_emit_level("DEBUG"))
        finally:
            if old is not None:
                os.environ["NAVDECK_LOG_LEVEL"] = old

    def test_warn_and_debug_sink_attach_default_level(self):
        captured = []
        old_emit = log.emit
        log.emit = lambda payload: captured.append(payload)
        try:
            _warn_sink("warn-msg")
            _debug_sink({"message": "dbg-msg", "level": "INFO"})
        finally:
            log.emit = old_emit
        self.assertEqual(captured[0]["level"], "WARNING")
        self.assertEqual(captured[0]["source"], "navdeck.warn")
        self.assertEqual(captured[1]["level"], "INFO")
        self.assertEqual(captured[1]["source"], "navdeck.debug")

    def test_log_stream_writes_to_navdeck_logger(self):
        with self.assertLogs("navdeck.bus", level=logging.INFO) as cm:
            {"message": "tab opened", "path": "/a"} >> log
        self.assertIn("tab opened", cm.output[0])


if __name__ == "__main__":
    unittest.main()
