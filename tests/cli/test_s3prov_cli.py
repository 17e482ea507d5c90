"""Tests for the s3prov CLI."""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from s3prov.cli import app
from s3prov.core.errors import HandlerError
from s3prov.resources.base import ResourceData


class TestIdCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def test_app_help(self):
        result = self.runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "id" in result.output
        assert "acl" in result.output
        assert "tags" in result.output

    def test_version(self):
        result = self.runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip()

    def test_encode(self):
        result = self.runner.invoke(app, ["id", "encode", "my-bucket", "--owner", "123456789012", "--acl", "private"])
        assert result.exit_code == 0
        assert result.output.strip() == "my-bucket,123456789012/private"

    def test_encode_bucket_only(self):
        result = self.runner.invoke(app, ["id", "encode", "my-bucket"])
        assert result.exit_code == 0
        assert result.output.strip() == "my-bucket"

    def test_decode_json(self):
        result = self.runner.invoke(app, ["id", "decode", "my-bucket/private", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "bucket": "my-bucket",
            "expected_bucket_owner": "",
            "acl": "private",
        }

    def test_decode_text(self):
        result = self.runner.invoke(app, ["id", "decode", "my-bucket,123456789012"])
        assert result.exit_code == 0
        assert "bucket=my-bucket" in result.output
        assert "expected_bucket_owner=123456789012" in result.output

    def test_decode_malformed_exits_3(self):
        result = self.runner.invoke(app, ["id", "decode", "my-bucket,"])
        assert result.exit_code == 3


class TestResourceCommands:
    def setup_method(self):
        self.runner = CliRunner()

    def test_tags_default(self):
        result = self.runner.invoke(
            app,
            ["tags", "default", "--set", "default_tags.tags={Env: dev, 'aws:x': y}", "--set", "region=us-gov-west-1"],
        )
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload == {"id": "aws-us-gov", "tags": {"Env": "dev"}}

    def test_missing_config_file_exits_2(self):
        result = self.runner.invoke(app, ["tags", "default", "-c", "/nonexistent/config.yaml"])
        assert result.exit_code == 2

    def test_acl_read_prints_state(self):
        data = ResourceData(id="my-bucket/private")
        data.set("bucket", "my-bucket")
        data.set("acl", "private")
        with patch("s3prov.resources.bucket_acl.BucketAclHandler.read", return_value=data):
            result = self.runner.invoke(app, ["acl", "read", "my-bucket/private"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["id"] == "my-bucket/private"
        assert payload["acl"] == "private"

    def test_acl_read_gone(self):
        with patch("s3prov.resources.bucket_acl.BucketAclHandler.read", return_value=None):
            result = self.runner.invoke(app, ["acl", "read", "gone-bucket"])
        assert result.exit_code == 0
        assert "not found" in result.output

    def test_acl_read_malformed_exits_3(self):
        result = self.runner.invoke(app, ["acl", "read", ","])
        assert result.exit_code == 3

    def test_acl_apply_invalid_acl_exits_2(self):
        result = self.runner.invoke(app, ["acl", "apply", "my-bucket", "--acl", "everyone"])
        assert result.exit_code == 2

    def test_acl_apply_handler_error_exits_4(self):
        with patch("s3prov.resources.bucket_acl.BucketAclHandler.create", side_effect=HandlerError("denied", code="AccessDenied")):
            result = self.runner.invoke(app, ["acl", "apply", "my-bucket", "--acl", "private"])
        assert result.exit_code == 4

    def test_acl_apply_prints_state(self):
        def _create(self, data):
            data.id = "my-bucket/private"
            return data

        with patch("s3prov.resources.bucket_acl.BucketAclHandler.create", _create):
            result = self.runner.invoke(app, ["acl", "apply", "my-bucket", "--acl", "private"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["id"] == "my-bucket/private"

    def test_config_fingerprint_logged(self):
        with patch("s3prov.cli.log_config_fingerprint") as fingerprint:
            result = self.runner.invoke(app, ["tags", "default", "--set", "region=eu-west-1"])
        assert result.exit_code == 0
        logged = fingerprint.call_args[0][0]
        assert logged["region"] == "eu-west-1"
