import unittest

from s3prov.config.models import IgnoreTagsConfig
from s3prov.tags import KeyValueTags


class TestKeyValueTags(unittest.TestCase):
    def test_ignore_aws(self):
        tags = KeyValueTags({"aws:cloudformation:stack-name": "x", "Name": "n"})
        self.assertEqual(tags.ignore_aws().to_dict(), {"Name": "n"})

    def test_ignore_config_keys_and_prefixes(self):
        tags = KeyValueTags({"Owner": "me", "kubernetes.io/cluster": "c", "Env": "dev"})
        cfg = IgnoreTagsConfig(keys=["Owner"], key_prefixes=["kubernetes.io/"])
        self.assertEqual(tags.ignore_config(cfg).to_dict(), {"Env": "dev"})

    def test_ignore_config_none_is_identity(self):
        tags = KeyValueTags({"Env": "dev"})
        self.assertIs(tags.ignore_config(None), tags)

    def test_mapping_protocol(self):
        tags = KeyValueTags({"a": "1", "b": "2"})
        self.assertEqual(len(tags), 2)
        self.assertEqual(tags["a"], "1")
        self.assertEqual(sorted(tags), ["a", "b"])


if __name__ == "__main__":
    unittest.main()
