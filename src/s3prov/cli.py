from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
import yaml
from typer import Argument, Option

from .client import ProviderClient
from .config.loader import load_config
from .core.errors import ConfigError, S3ProvError, get_exit_code
from .core.ids import create_resource_id, parse_resource_id
from .observability.logging import get_logger, log_config_fingerprint, set_verbose
from .observability.tracing import enable_tracing
from .resources import DATA_SOURCES, HANDLERS, BaseHandler, BucketAcl, ResourceData, load_model

app = typer.Typer(
    name="s3prov",
    help="S3 provisioning handlers - inspect resource ids, bucket ACLs and default tags",
    no_args_is_help=True,
    add_completion=False,
)
id_app = typer.Typer(help="Encode and decode bucket ACL resource ids", no_args_is_help=True)
acl_app = typer.Typer(help="Manage S3 bucket ACLs", no_args_is_help=True)
tags_app = typer.Typer(help="Provider tag settings", no_args_is_help=True)
app.add_typer(id_app, name="id")
app.add_typer(acl_app, name="acl")
app.add_typer(tags_app, name="tags")

DEFAULT_CONFIG = "s3prov.yaml"


def _fail(exc: S3ProvError) -> NoReturn:
    typer.echo(f"Error: {exc.message}", err=True)
    raise typer.Exit(get_exit_code(exc))


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def _build_client(config: str, set_overrides: Optional[List[str]], verbose: bool, tracing: bool) -> ProviderClient:
    set_verbose(verbose)
    if tracing:
        enable_tracing("s3prov")
    path = config if Path(config).exists() else None
    if path is None and config != DEFAULT_CONFIG:
        raise ConfigError(f"Config file not found: {config}")
    cfg = load_config(path, set_overrides=set_overrides)
    log_config_fingerprint(cfg.model_dump())
    return ProviderClient(cfg)


def _handler(resource_type: str, client: ProviderClient) -> BaseHandler:
    return HANDLERS[resource_type](client)


@id_app.command("encode")
def id_encode(
    bucket: str = Argument(..., help="Bucket name"),
    owner: str = Option("", "--owner", help="Expected bucket owner account id"),
    acl: str = Option("", "--acl", help="Canned ACL"),
) -> None:
    """Print the resource id for a bucket, owner and ACL."""
    typer.echo(create_resource_id(bucket, owner, acl))


@id_app.command("decode")
def id_decode(
    resource_id: str = Argument(..., help="Resource id to decode"),
    json_output: bool = Option(False, "--json", help="Print as JSON"),
) -> None:
    """Split a resource id into bucket, expected owner and ACL."""
    try:
        parsed = parse_resource_id(resource_id)
    except S3ProvError as e:
        _fail(e)
    if json_output:
        _echo_json(
            {
                "bucket": parsed.bucket,
                "expected_bucket_owner": parsed.expected_bucket_owner,
                "acl": parsed.acl,
            }
        )
        return
    typer.echo(f"bucket={parsed.bucket}")
    typer.echo(f"expected_bucket_owner={parsed.expected_bucket_owner}")
    typer.echo(f"acl={parsed.acl}")


@acl_app.command("read")
def acl_read(
    resource_id: str = Argument(..., help="Bucket ACL resource id"),
    config: str = Option(DEFAULT_CONFIG, "-c", "--config", help="Path to provider config file"),
    set_overrides: Optional[List[str]] = Option(None, "--set", help="Override config values (key.path=value)"),
    verbose: bool = Option(False, "-v", "--verbose", help="Enable verbose output"),
    tracing: bool = Option(False, "--tracing", help="Enable OpenTelemetry tracing"),
) -> None:
    """Read the ACL of a bucket identified by its resource id."""
    try:
        client = _build_client(config, set_overrides, verbose, tracing)
        handler = _handler("s3_bucket_acl", client)
        data = handler.read(handler.import_state(resource_id))
    except S3ProvError as e:
        _fail(e)
    if data is None:
        typer.echo(f"Bucket for {resource_id} not found; nothing to track.")
        return
    _echo_json(data.state)


@acl_app.command("apply")
def acl_apply(
    bucket: str = Argument(..., help="Bucket name"),
    owner: Optional[str] = Option(None, "--owner", help="Expected bucket owner account id"),
    acl: Optional[str] = Option(None, "--acl", help="Canned ACL"),
    policy_file: Optional[Path] = Option(None, "--policy-file", help="YAML/JSON file with an access_control_policy block"),
    config: str = Option(DEFAULT_CONFIG, "-c", "--config", help="Path to provider config file"),
    set_overrides: Optional[List[str]] = Option(None, "--set", help="Override config values (key.path=value)"),
    verbose: bool = Option(False, "-v", "--verbose", help="Enable verbose output"),
    tracing: bool = Option(False, "--tracing", help="Enable OpenTelemetry tracing"),
) -> None:
    """Put a bucket ACL and print the resulting state, including its id."""
    logger = get_logger("s3prov.cli")
    attributes: dict[str, Any] = {"bucket": bucket, "expected_bucket_owner": owner, "acl": acl}
    try:
        if policy_file is not None:
            try:
                attributes["access_control_policy"] = yaml.safe_load(policy_file.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Cannot load policy file {policy_file}: {e}") from e
        model = load_model(BucketAcl, attributes)
        client = _build_client(config, set_overrides, verbose, tracing)
        data = _handler("s3_bucket_acl", client).create(ResourceData.from_model(model))
    except S3ProvError as e:
        logger.error("Bucket ACL apply failed", bucket=bucket, error=str(e))
        _fail(e)
    _echo_json(data.state)


@tags_app.command("default")
def tags_default(
    config: str = Option(DEFAULT_CONFIG, "-c", "--config", help="Path to provider config file"),
    set_overrides: Optional[List[str]] = Option(None, "--set", help="Override config values (key.path=value)"),
    verbose: bool = Option(False, "-v", "--verbose", help="Enable verbose output"),
) -> None:
    """Print the provider default tags (without aws: and ignored keys)."""
    try:
        client = _build_client(config, set_overrides, verbose, False)
    except S3ProvError as e:
        _fail(e)
    _echo_json(DATA_SOURCES["default_tags"](client).read().state)


@app.callback(invoke_without_command=True)
def version_callback(
    ctx: typer.Context,
    version: bool = Option(False, "--version", help="Show version and exit"),
) -> None:
    """s3prov CLI."""
    if version:
        import importlib.metadata as importlib_metadata

        try:
            version_str = importlib_metadata.version("s3prov")
        except importlib_metadata.PackageNotFoundError:
            version_str = "0.0.0+local"
        typer.echo(version_str)
        raise typer.Exit(0)


def main() -> None:
    """Main entry point for the s3prov CLI."""
    app()


if __name__ == "__main__":
    main()
