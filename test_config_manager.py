import json
import os
import shutil
import tempfile
import unittest

import config_manager
from errors import ConfigIOError
from models import BaselineRef, MailTarget, SubmitConfig, TaskTag


class TestConfigManager(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.tmp_dir, "labsubmit", "config.json")

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def _write(self, data):
        os.makedirs(os.path.dirname(self.config_path), exist_ok=True)
        with open(self.config_path, "w", encoding="utf-8") as f:
            if isinstance(data, str):
                f.write(data)
            else:
                json.dump(data, f)

    def _read(self):
        with open(self.config_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def test_bootstrap_writes_defaults(self):
        """首次运行写入默认配置并标记 created"""
        result = config_manager.load_or_bootstrap(self.config_path)

        self.assertTrue(result.created)
        self.assertEqual(result.config, SubmitConfig())
        self.assertEqual(
            self._read(),
            {
                "task": {"lab": 3, "task": 2},
                "mail": {"to": "lkp-maintainers@os.rwth-aachen.de", "suppress_cc": True},
                "git": {"root_commit": "v6.5.7"},
            },
        )

    def test_existing_file_is_loaded_and_not_created(self):
        self._write({"task": {"lab": 5, "task": 1}})
        result = config_manager.load_or_bootstrap(self.config_path)

        self.assertFalse(result.created)
        self.assertEqual(result.config.task, TaskTag(lab=5, task=1))

    def test_missing_fields_are_filled_and_persisted(self):
        self._write({"mail": {"to": "me@example.org"}})
        result = config_manager.load_or_bootstrap(self.config_path)

        self.assertEqual(result.config.mail, MailTarget(to="me@example.org", suppress_cc=True))
        self.assertEqual(result.config.git, BaselineRef())
        data = self._read()
        self.assertEqual(data["mail"]["suppress_cc"], True)
        self.assertEqual(data["git"]["root_commit"], "v6.5.7")
        self.assertEqual(data["task"], {"lab": 3, "task": 2})

    def test_unknown_keys_survive_rewrite(self):
        self._write(
            {
                "task": {"lab": 4, "task": 3, "note": "keep me"},
                "future": {"enabled": True},
            }
        )
        config_manager.load_or_bootstrap(self.config_path)

        data = self._read()
        self.assertEqual(data["task"]["note"], "keep me")
        self.assertEqual(data["future"], {"enabled": True})

    def test_round_trip_is_idempotent(self):
        config = SubmitConfig(
            task=TaskTag(lab=7, task=9),
            mail=MailTarget(to="lab@example.org", suppress_cc=False),
            git=BaselineRef(root_commit="deadbeef"),
        )
        config_manager.save_config(self.config_path, config)

        first = config_manager.load_config(self.config_path)
        config_manager.save_config(self.config_path, first)
        second = config_manager.load_config(self.config_path)

        self.assertEqual(first, config)
        self.assertEqual(second, first)

    def test_invalid_json_raises_config_error(self):
        self._write("{not json")
        with self.assertRaises(ConfigIOError):
            config_manager.load_or_bootstrap(self.config_path)

    def test_non_utf8_file_raises_config_error(self):
        os.makedirs(os.path.dirname(self.config_path), exist_ok=True)
        with open(self.config_path, "wb") as f:
            f.write(b'{"git": {"root_commit": "v\xff"}}')
        with self.assertRaises(ConfigIOError):
            config_manager.load_or_bootstrap(self.config_path)

    def test_legacy_test_group_is_migrated(self):
        self._write({"test": {"lab": 6, "task": 1}, "git": {"root_commit": "v6.6"}})
        result = config_manager.load_or_bootstrap(self.config_path)

        self.assertEqual(result.config.task, TaskTag(lab=6, task=1))
        data = self._read()
        self.assertEqual(data["task"], {"lab": 6, "task": 1})
        self.assertNotIn("test", data)

    def test_task_group_wins_over_legacy_group(self):
        self._write({"task": {"lab": 4, "task": 4}, "test": {"lab": 1, "task": 1}})
        result = config_manager.load_config(self.config_path)
        self.assertEqual(result.task, TaskTag(lab=4, task=4))

    def test_wrong_field_type_raises_config_error(self):
        for data in (
            {"task": {"lab": "three"}},
            {"task": {"task": True}},
            {"mail": {"suppress_cc": "yes"}},
            {"git": {"root_commit": ""}},
            {"git": "v6.5.7"},
            [1, 2, 3],
        ):
            with self.subTest(data=data):
                self._write(data)
                with self.assertRaises(ConfigIOError):
                    config_manager.load_config(self.config_path)

    def test_config_dir_per_platform(self):
        environ = {"HOME": "/home/student"}
        self.assertEqual(
            config_manager.get_config_dir("linux", environ),
            os.path.join("/home/student", ".config", "labsubmit"),
        )
        self.assertEqual(
            config_manager.get_config_dir("linux", {"HOME": "/h", "XDG_CONFIG_HOME": "/xdg"}),
            os.path.join("/xdg", "labsubmit"),
        )
        self.assertEqual(
            config_manager.get_config_dir("darwin", environ),
            os.path.join(
                "/home/student",
                "Library",
                "Application Support",
                "dev.luckyturtle.labsubmit",
            ),
        )
        self.assertEqual(
            config_manager.get_config_dir("win32", {"HOME": "C:/Users/s", "APPDATA": "C:/AppData"}),
            os.path.join("C:/AppData", "luckyturtle", "labsubmit", "config"),
        )

    def test_explicit_path_wins(self):
        self.assertEqual(
            config_manager.get_config_path(self.config_path), self.config_path
        )


if __name__ == "__main__":
    unittest.main()
