# tests/test_config_validator.py

"""
Tests for the startup configuration report.
"""

import logging

from core.config import settings
from core.config_validator import log_config_report, validate_optional_config, validate_required_config


def test_missing_supabase_credentials(monkeypatch):
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    monkeypatch.setattr(settings, "SUPABASE_SERVICE_ROLE_KEY", None)
    assert validate_required_config() == ["SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY"]


def test_missing_inheritance_file_warns_of_startup_failure(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "ROLE_INHERITANCE_FILE", str(tmp_path / "missing.json"))
    monkeypatch.setattr(settings, "BACKEND_CORS_ORIGINS", ["http://localhost:3000"])

    warnings = validate_optional_config()

    assert len(warnings) == 1
    assert "startup will fail" in warnings[0]
    assert "built-in" not in warnings[0]


def test_existing_inheritance_file_is_fine(monkeypatch, tmp_path):
    path = tmp_path / "inheritance.json"
    path.write_text("{}")
    monkeypatch.setattr(settings, "ROLE_INHERITANCE_FILE", str(path))
    monkeypatch.setattr(settings, "BACKEND_CORS_ORIGINS", ["http://localhost:3000"])

    assert validate_optional_config() == []


def test_report_logs_missing_settings(monkeypatch, caplog):
    monkeypatch.setattr(settings, "SUPABASE_URL", None)
    with caplog.at_level(logging.ERROR, logger="permission_manager"):
        log_config_report()
    assert "Missing required setting: SUPABASE_URL" in caplog.text
