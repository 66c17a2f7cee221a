import json
import logging

from utils.app_config import DEFAULTS, get_db_folder, get_horizon_days, load_config, save_config
from utils.log_setup import configure_logging


class TestConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.json") == DEFAULTS

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        assert load_config(path) == DEFAULTS

    def test_non_object_is_ignored(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert load_config(path) == DEFAULTS

    def test_stored_values_override_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"horizon_days": 90}), encoding="utf-8")

        config = load_config(path)

        assert config["horizon_days"] == 90
        assert config["log_level"] == "INFO"

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        save_config({"db_folder": "/data", "log_level": "DEBUG"}, path)

        assert load_config(path)["db_folder"] == "/data"
        assert not path.with_suffix(".tmp").exists()

    def test_db_folder(self):
        assert get_db_folder({"db_folder": "/srv/ledger"}) == "/srv/ledger"

    def test_horizon_days(self):
        assert get_horizon_days({"horizon_days": "180"}) == 180
        assert get_horizon_days({"horizon_days": 0}) == 365
        assert get_horizon_days({"horizon_days": "soon"}) == 365


class TestLogging:
    def test_writes_to_log_file(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        log_file = tmp_path / "logs" / "ledger.log"
        try:
            configure_logging("DEBUG", log_file)
            logging.getLogger("services.recurring_service").info("applied %d", 3)
            for handler in root.handlers:
                handler.flush()
            assert "applied 3" in log_file.read_text(encoding="utf-8")
            assert root.level == logging.DEBUG
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
                handler.close()
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)

    def test_unknown_level_falls_back_to_info(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            configure_logging("LOUD")
            assert root.level == logging.INFO
        finally:
            for handler in list(root.handlers):
                root.removeHandler(handler)
            for handler in saved_handlers:
                root.addHandler(handler)
            root.setLevel(saved_level)
