"""``s3_bucket_acl`` resource.

Manages the ACL of an existing bucket, either through a canned ``acl`` or an
explicit ``access_control_policy``. The resource id packs the bucket, the
expected bucket owner and the canned ACL (see :mod:`s3prov.core.ids`).
Deleting the resource only stops tracking it; the bucket keeps its ACL.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.ids import create_resource_id, parse_resource_id
from ..core.retry import error_code, retry_on_codes
from ..observability.tracing import trace_operation
from .base import BaseHandler, ResourceData

ERR_NO_SUCH_BUCKET = "NoSuchBucket"

CannedAcl = Literal[
    "private",
    "public-read",
    "public-read-write",
    "authenticated-read",
    "aws-exec-read",
    "bucket-owner-read",
    "bucket-owner-full-control",
    "log-delivery-write",
]
GranteeType = Literal["CanonicalUser", "AmazonCustomerByEmail", "Group"]
Permission = Literal["FULL_CONTROL", "WRITE", "WRITE_ACP", "READ", "READ_ACP"]


class Grantee(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: GranteeType
    id: Optional[str] = None
    email_address: Optional[str] = None
    uri: Optional[str] = None
    display_name: Optional[str] = None  # computed


class Grant(BaseModel):
    model_config = ConfigDict(extra="forbid")

    grantee: Optional[Grantee] = None
    permission: Permission


class Owner(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    display_name: Optional[str] = None


class AccessControlPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid")

    owner: Owner
    grant: List[Grant] = Field(default_factory=list)


class BucketAcl(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bucket: str = Field(min_length=1, max_length=63)
    expected_bucket_owner: Optional[str] = Field(default=None, pattern=r"^\d{12}$")
    acl: Optional[CannedAcl] = None
    access_control_policy: Optional[AccessControlPolicy] = None

    @model_validator(mode="after")
    def _acl_conflicts_with_policy(self) -> "BucketAcl":
        if self.acl is not None and self.access_control_policy is not None:
            raise ValueError('"acl" conflicts with "access_control_policy"')
        return self


def _set_if(target: dict[str, Any], key: str, value: Any) -> None:
    if value:
        target[key] = value


def expand_grantee(tf_map: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if not tf_map:
        return None
    result: dict[str, Any] = {}
    _set_if(result, "EmailAddress", tf_map.get("email_address"))
    _set_if(result, "ID", tf_map.get("id"))
    _set_if(result, "Type", tf_map.get("type"))
    _set_if(result, "URI", tf_map.get("uri"))
    return result


def expand_grants(grants: list[dict[str, Any]]) -> list[dict[str, Any]]:
    result = []
    for tf_map in grants:
        if not isinstance(tf_map, dict):
            continue
        grant: dict[str, Any] = {}
        grantee = expand_grantee(tf_map.get("grantee"))
        if grantee is not None:
            grant["Grantee"] = grantee
        _set_if(grant, "Permission", tf_map.get("permission"))
        result.append(grant)
    return result


def expand_owner(tf_map: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if not tf_map:
        return None
    owner: dict[str, Any] = {}
    _set_if(owner, "DisplayName", tf_map.get("display_name"))
    _set_if(owner, "ID", tf_map.get("id"))
    return owner


def expand_access_control_policy(tf_map: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """Attribute map -> ``AccessControlPolicy`` request shape."""
    if not tf_map:
        return None
    result: dict[str, Any] = {}
    if tf_map.get("grant"):
        result["Grants"] = expand_grants(tf_map["grant"])
    owner = expand_owner(tf_map.get("owner"))
    if owner is not None:
        result["Owner"] = owner
    return result


def flatten_grantee(grantee: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if grantee is None:
        return None
    return {
        attr: grantee[key]
        for key, attr in (
            ("DisplayName", "display_name"),
            ("EmailAddress", "email_address"),
            ("ID", "id"),
            ("Type", "type"),
            ("URI", "uri"),
        )
        if grantee.get(key) is not None
    }


def flatten_grants(grants: list[Optional[dict[str, Any]]]) -> list[dict[str, Any]]:
    results = []
    for grant in grants:
        if grant is None:
            continue
        m: dict[str, Any] = {}
        if grant.get("Grantee") is not None:
            m["grantee"] = flatten_grantee(grant["Grantee"])
        if grant.get("Permission") is not None:
            m["permission"] = grant["Permission"]
        results.append(m)
    return results


def flatten_owner(owner: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    if owner is None:
        return None
    m: dict[str, Any] = {}
    if owner.get("DisplayName") is not None:
        m["display_name"] = owner["DisplayName"]
    if owner.get("ID") is not None:
        m["id"] = owner["ID"]
    return m


def flatten_access_control_policy(output: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """``GetBucketAcl`` response -> attribute map."""
    if output is None:
        return None
    m: dict[str, Any] = {}
    if output.get("Grants"):
        m["grant"] = flatten_grants(output["Grants"])
    if output.get("Owner") is not None:
        m["owner"] = flatten_owner(output["Owner"])
    return m


def _comparable_policy(policy: Optional[dict[str, Any]]) -> Any:
    # display_name is computed and grants are unordered
    if not policy:
        return None

    def _strip(m: Optional[dict[str, Any]]) -> tuple:
        if not m:
            return ()
        return tuple(sorted((k, v) for k, v in m.items() if k != "display_name" and v is not None))

    grants = frozenset(
        (_strip(g.get("grantee")), g.get("permission")) for g in policy.get("grant") or []
    )
    return _strip(policy.get("owner")), grants


class BucketAclHandler(BaseHandler):
    resource_type = "s3_bucket_acl"

    @trace_operation("s3_bucket_acl.create")
    def create(self, data: ResourceData) -> ResourceData:
        bucket = data.get("bucket")
        expected_bucket_owner = data.get("expected_bucket_owner") or ""
        acl = data.get("acl") or ""

        params: dict[str, Any] = {"Bucket": bucket}
        if acl:
            params["ACL"] = acl
        if expected_bucket_owner:
            params["ExpectedBucketOwner"] = expected_bucket_owner
        policy, ok = data.get_ok("access_control_policy")
        if ok:
            params["AccessControlPolicy"] = expand_access_control_policy(policy)

        with self.log.operation("create bucket ACL", bucket=bucket):
            try:
                # A freshly created bucket may not be visible yet
                self.call(
                    self.client.s3.put_bucket_acl,
                    params,
                    should_retry=retry_on_codes(ERR_NO_SUCH_BUCKET),
                )
            except (ClientError, BotoCoreError) as e:
                self.raise_error(f"error creating S3 bucket ACL for {bucket}", e)

        data.id = create_resource_id(bucket, expected_bucket_owner, acl)
        data.new_resource = True
        try:
            refreshed = self.read(data)
        finally:
            data.new_resource = False
        if refreshed is None:  # pragma: no cover - read only drops existing resources
            self.raise_error(f"error reading S3 bucket ACL ({data.id}) after creation")
        return refreshed

    @trace_operation("s3_bucket_acl.read")
    def read(self, data: ResourceData) -> Optional[ResourceData]:
        parsed = parse_resource_id(data.id)

        params: dict[str, Any] = {"Bucket": parsed.bucket}
        if parsed.expected_bucket_owner:
            params["ExpectedBucketOwner"] = parsed.expected_bucket_owner

        try:
            output = self.call(self.client.s3.get_bucket_acl, params)
        except ClientError as e:
            if not data.new_resource and error_code(e) == ERR_NO_SUCH_BUCKET:
                self.log.warning(f"S3 Bucket ACL ({data.id}) not found, removing from state", id=data.id)
                data.id = ""
                return None
            self.raise_error(f"error getting S3 bucket ACL ({data.id})", e)
        except BotoCoreError as e:
            self.raise_error(f"error getting S3 bucket ACL ({data.id})", e)

        if output is None:
            self.raise_error(f"error getting S3 bucket ACL ({data.id}): empty output")

        data.set("acl", parsed.acl)
        data.set("bucket", parsed.bucket)
        data.set("expected_bucket_owner", parsed.expected_bucket_owner)
        data.set("access_control_policy", flatten_access_control_policy(output))
        return data

    @trace_operation("s3_bucket_acl.update")
    def update(self, data: ResourceData) -> ResourceData:
        parsed = parse_resource_id(data.id)
        acl = parsed.acl

        params: dict[str, Any] = {"Bucket": parsed.bucket}
        if parsed.expected_bucket_owner:
            params["ExpectedBucketOwner"] = parsed.expected_bucket_owner

        policy = data.config_value("access_control_policy")
        if policy is not None and _comparable_policy(policy) != _comparable_policy(data.prior_value("access_control_policy")):
            params["AccessControlPolicy"] = expand_access_control_policy(policy)

        acl_changed = data.has_change("acl") and (data.config_value("acl") or "") != acl
        if acl_changed:
            acl = data.config_value("acl") or ""
            if acl:
                params["ACL"] = acl

        with self.log.operation("update bucket ACL", id=data.id):
            try:
                self.call(self.client.s3.put_bucket_acl, params)
            except (ClientError, BotoCoreError) as e:
                self.raise_error(f"error updating S3 bucket ACL ({data.id})", e)

        if acl_changed:
            data.id = create_resource_id(parsed.bucket, parsed.expected_bucket_owner, acl)

        refreshed = self.read(data)
        if refreshed is None:
            self.raise_error(f"error reading S3 bucket ACL ({data.id}) after update: bucket not found")
        return refreshed

    def delete(self, data: ResourceData) -> None:
        self.log.debug("Removing S3 bucket ACL from state only", id=data.id)
        data.id = ""


__all__ = [
    "AccessControlPolicy",
    "BucketAcl",
    "BucketAclHandler",
    "Grant",
    "Grantee",
    "Owner",
    "expand_access_control_policy",
    "flatten_access_control_policy",
]
