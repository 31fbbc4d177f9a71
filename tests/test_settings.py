import json
import tempfile
import unittest
from pathlib import Path

from s3_filesystem.settings import AdapterSettings, SettingsStorage


class SettingsStorageTests(unittest.TestCase):
    def test_load_returns_defaults_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            storage = SettingsStorage(path)

            settings = storage.load()

            self.assertEqual(AdapterSettings(), settings)

    def test_load_returns_defaults_for_unreadable_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text("{not json", encoding="utf-8")
            storage = SettingsStorage(path)

            with self.assertLogs("s3_filesystem.settings", level="WARNING"):
                settings = storage.load()

            self.assertEqual(AdapterSettings(), settings)

    def test_load_sanitizes_invalid_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            payload = {
                "bucket": 123,
                "profile": None,
                "endpoint_url": 42,
                "region_name": ["eu"],
                "options": ["not", "a", "mapping"],
                "page_size": "nope",
            }
            path.write_text(json.dumps(payload), encoding="utf-8")
            storage = SettingsStorage(path)

            settings = storage.load()

            self.assertEqual("", settings.bucket)
            self.assertEqual("", settings.profile)
            self.assertEqual("", settings.endpoint_url)
            self.assertEqual("", settings.region_name)
            self.assertEqual({}, settings.options)
            self.assertIsNone(settings.page_size)

    def test_load_clamps_page_size(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "settings.json"
            path.write_text(json.dumps({"bucket": "media", "page_size": 5000}), encoding="utf-8")

            settings = SettingsStorage(path).load()

            self.assertEqual("media", settings.bucket)
            self.assertEqual(1000, settings.page_size)

    def test_save_round_trips(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "settings.json"
            storage = SettingsStorage(path)
            settings = AdapterSettings(
                bucket="media",
                profile="prod",
                endpoint_url="https://one",
                region_name="eu-west-1",
                options={"RequestPayer": "requester"},
                page_size=0,
            )

            storage.save(settings)

            saved = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual("media", saved["bucket"])
            self.assertEqual("prod", saved["profile"])
            self.assertEqual("https://one", saved["endpoint_url"])
            self.assertEqual("eu-west-1", saved["region_name"])
            self.assertNotIn("secret_key", saved)
            self.assertEqual({"RequestPayer": "requester"}, saved["options"])
            self.assertIsNone(saved["page_size"])
            self.assertEqual(
                AdapterSettings(
                    bucket="media",
                    profile="prod",
                    endpoint_url="https://one",
                    region_name="eu-west-1",
                    options={"RequestPayer": "requester"},
                ),
                storage.load(),
            )


if __name__ == "__main__":
    unittest.main()
