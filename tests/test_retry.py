from __future__ import annotations

import unittest

from botocore.exceptions import ClientError

from s3prov.core.retry import error_code, http_status, retry_call, retry_on_codes
from s3prov.observability import metrics


def _client_error(code: str, status: int = 404) -> ClientError:
    return ClientError(
        {"Error": {"Code": code, "Message": code}, "ResponseMetadata": {"HTTPStatusCode": status}},
        "PutBucketAcl",
    )


class TestRetryHelpers(unittest.TestCase):
    def setUp(self) -> None:
        metrics.clear()

    def test_retry_succeeds_after_transient(self) -> None:
        calls = {"count": 0}

        class Dummy(Exception):
            status_code = 500

        def func():
            calls["count"] += 1
            if calls["count"] < 3:
                raise Dummy()
            return "ok"

        result = retry_call(func, max_attempts=5, base_delay=0.0, max_delay=0.0, sleep=lambda _d: None)
        self.assertEqual(result, "ok")
        self.assertEqual(calls["count"], 3)
        self.assertEqual(metrics.get("retry.attempts"), 2)
        self.assertEqual(metrics.get("retry.success.after_retry"), 1)

    def test_retry_stops_on_non_retriable(self) -> None:
        class CustomError(Exception):
            status_code = 400

        with self.assertRaises(CustomError):
            retry_call(lambda: (_ for _ in ()).throw(CustomError()), max_attempts=2, sleep=lambda _d: None)

    def test_retry_on_codes(self) -> None:
        calls = {"count": 0}

        def put_bucket_acl():
            calls["count"] += 1
            if calls["count"] < 2:
                raise _client_error("NoSuchBucket")
            return {}

        result = retry_call(
            put_bucket_acl,
            should_retry=retry_on_codes("NoSuchBucket"),
            base_delay=0.0,
            max_delay=0.0,
            sleep=lambda _d: None,
        )
        self.assertEqual(result, {})
        self.assertEqual(calls["count"], 2)

    def test_retry_on_codes_gives_up(self) -> None:
        def always_missing():
            raise _client_error("NoSuchBucket")

        with self.assertRaises(ClientError):
            retry_call(
                always_missing,
                should_retry=retry_on_codes("NoSuchBucket"),
                max_attempts=3,
                base_delay=0.0,
                max_delay=0.0,
                sleep=lambda _d: None,
            )
        self.assertEqual(metrics.get("retry.failures.always_missing"), 1)

    def test_transient_s3_codes_retried_by_default(self) -> None:
        calls = {"count": 0}

        def get_bucket_acl():
            calls["count"] += 1
            if calls["count"] < 2:
                raise _client_error("SlowDown", 503)
            return {"Grants": []}

        result = retry_call(get_bucket_acl, base_delay=0.0, max_delay=0.0, sleep=lambda _d: None)
        self.assertEqual(result, {"Grants": []})
        self.assertEqual(calls["count"], 2)

    def test_max_attempts_of_one_does_not_retry(self) -> None:
        def throttled():
            raise _client_error("Throttling", 400)

        with self.assertRaises(ClientError):
            retry_call(throttled, max_attempts=1, sleep=lambda _d: self.fail("slept"))
        self.assertEqual(metrics.get("retry.attempts.throttled"), 1)

    def test_error_code(self) -> None:
        self.assertEqual(error_code(_client_error("AccessDenied", 403)), "AccessDenied")
        self.assertIsNone(error_code(ValueError("x")))
        self.assertEqual(http_status(_client_error("AccessDenied", 403)), 403)
        self.assertIsNone(http_status(ValueError("x")))


if __name__ == "__main__":
    unittest.main()
