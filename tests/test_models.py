import unittest

from s3_filesystem.models import DirectoryAttributes, FileAttributes


class AttributeModelTests(unittest.TestCase):
    def test_file_attributes_are_hashable(self):
        first = FileAttributes("a.txt", file_size=3, extra_metadata={"etag": '"e"'})
        second = FileAttributes("a.txt", file_size=3, extra_metadata={"etag": '"e"'})

        self.assertEqual(hash(first), hash(second))
        self.assertEqual(1, len({first, second}))

    def test_directory_attributes_are_hashable(self):
        self.assertEqual(2, len({DirectoryAttributes("dir1"), DirectoryAttributes("dir2")}))

    def test_extra_metadata_is_read_only(self):
        attributes = FileAttributes("a.txt", extra_metadata={"etag": '"e"'})

        with self.assertRaises(TypeError):
            attributes.extra_metadata["etag"] = '"other"'
        with self.assertRaises(TypeError):
            DirectoryAttributes("dir1").extra_metadata["owner"] = "someone"

    def test_extra_metadata_is_copied_from_caller(self):
        metadata = {"etag": '"e"'}
        attributes = FileAttributes("a.txt", extra_metadata=metadata)

        metadata["etag"] = '"changed"'

        self.assertEqual('"e"', attributes.extra_metadata["etag"])

    def test_equality_compares_metadata_contents(self):
        self.assertEqual(
            FileAttributes("a.txt", extra_metadata={"etag": '"e"'}),
            FileAttributes("a.txt", extra_metadata={"etag": '"e"'}),
        )
        self.assertNotEqual(
            FileAttributes("a.txt", extra_metadata={"etag": '"e"'}),
            FileAttributes("a.txt", extra_metadata={"etag": '"f"'}),
        )


if __name__ == "__main__":
    unittest.main()
