import itertools
import os
import sys
import unittest


class TestBucketAclIds(unittest.TestCase):
    def setUp(self):
        repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        src_path = os.path.join(repo_root, "src")
        if src_path not in sys.path:
            sys.path.insert(0, src_path)

    def test_encode_shapes(self):
        from s3prov.core.ids import create_resource_id

        self.assertEqual(create_resource_id("my-bucket", "", ""), "my-bucket")
        self.assertEqual(create_resource_id("my-bucket", "", "private"), "my-bucket/private")
        self.assertEqual(create_resource_id("my-bucket", "123456789012", ""), "my-bucket,123456789012")
        self.assertEqual(
            create_resource_id("my-bucket", "123456789012", "private"),
            "my-bucket,123456789012/private",
        )

    def test_encode_is_total(self):
        from s3prov.core.ids import create_resource_id

        # Separators inside fields are accepted, just not invertible
        self.assertEqual(create_resource_id("", "", ""), "")
        self.assertEqual(create_resource_id("a,b", "c/d", "e"), "a,b,c/d/e")

    def test_decode_shapes(self):
        from s3prov.core.ids import BucketAclId, parse_resource_id

        self.assertEqual(parse_resource_id("my-bucket"), BucketAclId("my-bucket", "", ""))
        self.assertEqual(parse_resource_id("my-bucket/private"), BucketAclId("my-bucket", "", "private"))
        self.assertEqual(
            parse_resource_id("my-bucket,123456789012"),
            BucketAclId("my-bucket", "123456789012", ""),
        )
        self.assertEqual(
            parse_resource_id("my-bucket,123456789012/private"),
            BucketAclId("my-bucket", "123456789012", "private"),
        )

    def test_round_trip(self):
        from s3prov.core.ids import create_resource_id, parse_resource_id

        names = ["my-bucket", "b", "bucket.with.dots"]
        owners = ["", "123456789012"]
        acls = ["", "private", "bucket-owner-full-control"]
        for name, owner, acl in itertools.product(names, owners, acls):
            with self.subTest(name=name, owner=owner, acl=acl):
                parsed = parse_resource_id(create_resource_id(name, owner, acl))
                self.assertEqual((parsed.bucket, parsed.expected_bucket_owner, parsed.acl), (name, owner, acl))

    def test_decode_rejects_malformed(self):
        from s3prov.core.errors import MalformedIdentifier
        from s3prov.core.ids import parse_resource_id

        bad = [
            "",
            ",",
            "/",
            "my-bucket,",
            "my-bucket/",
            "/private",
            ",123456789012",
            ",123456789012/private",
            "my-bucket,123456789012/",
            "my-bucket,/private",
            "my-bucket,123,456",
            "a,b,c",
            "my-bucket/a/b",
            "my-bucket,123456789012/a/b",
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(MalformedIdentifier) as ctx:
                    parse_resource_id(raw)
                self.assertEqual(ctx.exception.raw_id, raw)

    def test_error_message_names_id_and_shapes(self):
        from s3prov.core.errors import MalformedIdentifier
        from s3prov.core.ids import parse_resource_id

        with self.assertRaises(MalformedIdentifier) as ctx:
            parse_resource_id("my-bucket,")
        message = str(ctx.exception)
        self.assertIn("(my-bucket,)", message)
        for shape in (
            "BUCKET or",
            "BUCKET,EXPECTED_BUCKET_OWNER or",
            "BUCKET/ACL or",
            "BUCKET,EXPECTED_BUCKET_OWNER/ACL",
        ):
            self.assertIn(shape, message)

    def test_structured_id_helpers(self):
        from s3prov.core.ids import BucketAclId

        parsed = BucketAclId.parse("my-bucket,123456789012/private")
        self.assertEqual(parsed.to_id(), "my-bucket,123456789012/private")
        self.assertEqual(str(BucketAclId("my-bucket", acl="private")), "my-bucket/private")


if __name__ == "__main__":
    unittest.main()
