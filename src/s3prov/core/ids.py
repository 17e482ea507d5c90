"""Composite resource identifiers for bucket ACL resources.

A bucket ACL is tracked by a single string that packs the bucket name, an
optional expected bucket owner (account id) and an optional canned ACL:

- ``BUCKET``
- ``BUCKET,EXPECTED_BUCKET_OWNER``
- ``BUCKET/ACL``
- ``BUCKET,EXPECTED_BUCKET_OWNER/ACL``

The string form exists for compatibility with previously persisted state.
Callers decode it into :class:`BucketAclId` straight away and work on the
structured value after that.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import MalformedIdentifier

BUCKET_ACL_SEPARATOR = "/"
BUCKET_AND_OWNER_SEPARATOR = ","


@dataclass(frozen=True)
class BucketAclId:
    bucket: str
    expected_bucket_owner: str = ""
    acl: str = ""

    @classmethod
    def parse(cls, raw_id: str) -> "BucketAclId":
        return parse_resource_id(raw_id)

    def to_id(self) -> str:
        return create_resource_id(self.bucket, self.expected_bucket_owner, self.acl)

    def __str__(self) -> str:
        return self.to_id()


def create_resource_id(bucket: str, expected_bucket_owner: str = "", acl: str = "") -> str:
    """Build the resource id from the bucket name and optional owner and ACL.

    Never fails. Field values containing a separator produce ids that do not
    parse back to the same triple.
    """

    if not expected_bucket_owner:
        if not acl:
            return bucket
        return BUCKET_ACL_SEPARATOR.join([bucket, acl])

    head = BUCKET_AND_OWNER_SEPARATOR.join([bucket, expected_bucket_owner])
    if not acl:
        return head
    return BUCKET_ACL_SEPARATOR.join([head, acl])


def _malformed(raw_id: str) -> MalformedIdentifier:
    own, sep = BUCKET_AND_OWNER_SEPARATOR, BUCKET_ACL_SEPARATOR
    return MalformedIdentifier(
        raw_id,
        f"unexpected format for ID ({raw_id}), expected BUCKET or BUCKET{own}EXPECTED_BUCKET_OWNER "
        f"or BUCKET{sep}ACL or BUCKET{own}EXPECTED_BUCKET_OWNER{sep}ACL",
    )


def parse_resource_id(raw_id: str) -> BucketAclId:
    """Split a resource id back into bucket, expected owner and ACL.

    Raises :class:`MalformedIdentifier` for anything outside the four shapes.
    """

    parts = raw_id.split(BUCKET_AND_OWNER_SEPARATOR)

    if len(parts) == 1 and parts[0]:
        with_acl = parts[0].split(BUCKET_ACL_SEPARATOR)
        if len(with_acl) == 1:
            return BucketAclId(bucket=with_acl[0])
        if len(with_acl) == 2 and with_acl[0] and with_acl[1]:
            return BucketAclId(bucket=with_acl[0], acl=with_acl[1])

    if len(parts) == 2 and parts[0] and parts[1]:
        with_acl = parts[1].split(BUCKET_ACL_SEPARATOR)
        if len(with_acl) == 1:
            return BucketAclId(bucket=parts[0], expected_bucket_owner=with_acl[0])
        if len(with_acl) == 2 and with_acl[0] and with_acl[1]:
            return BucketAclId(bucket=parts[0], expected_bucket_owner=with_acl[0], acl=with_acl[1])

    raise _malformed(raw_id)


__all__ = [
    "BUCKET_ACL_SEPARATOR",
    "BUCKET_AND_OWNER_SEPARATOR",
    "BucketAclId",
    "create_resource_id",
    "parse_resource_id",
]
