"""Tests for the migration helper."""

import os
from unittest.mock import patch

from followgraph.db.migrate import PROJECT_ROOT, alembic_config, upgrade


class TestMigrate:

    def test_config_points_at_project_alembic_dir(self):
        cfg = alembic_config()

        assert cfg.config_file_name == os.path.join(PROJECT_ROOT, "alembic.ini")
        assert cfg.get_main_option("script_location") == os.path.join(PROJECT_ROOT, "alembic")

    def test_migration_script_present(self):
        versions = os.listdir(os.path.join(PROJECT_ROOT, "alembic", "versions"))
        assert any(name.endswith("_add_follow_tables.py") for name in versions)

    @patch("followgraph.db.migrate.command.upgrade")
    def test_upgrade_defaults_to_head(self, mock_upgrade):
        cfg = alembic_config()
        upgrade(cfg=cfg)

        mock_upgrade.assert_called_once_with(cfg, "head")

    @patch("followgraph.db.migrate.command.upgrade")
    def test_upgrade_to_revision(self, mock_upgrade):
        upgrade("20260301120000")

        assert mock_upgrade.call_args[0][1] == "20260301120000"
