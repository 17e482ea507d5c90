from __future__ import annotations

import unittest

from s3prov.core.errors import (
    ConfigError,
    HandlerError,
    MalformedIdentifier,
    S3ProvError,
    get_exit_code,
)


class TestErrors(unittest.TestCase):
    def test_exit_codes(self) -> None:
        self.assertEqual(get_exit_code(S3ProvError("x")), 1)
        self.assertEqual(get_exit_code(ConfigError("x")), 2)
        self.assertEqual(get_exit_code(MalformedIdentifier("raw", "x")), 3)
        self.assertEqual(get_exit_code(HandlerError("x", code="AccessDenied")), 4)

    def test_subclass_inherits_exit_code(self) -> None:
        class OddConfig(ConfigError):
            pass

        self.assertEqual(get_exit_code(OddConfig("x")), 2)

    def test_handler_error_keeps_code(self) -> None:
        err = HandlerError("boom", code="NoSuchBucket")
        self.assertEqual(err.code, "NoSuchBucket")
        self.assertEqual(err.message, "boom")


if __name__ == "__main__":
    unittest.main()
