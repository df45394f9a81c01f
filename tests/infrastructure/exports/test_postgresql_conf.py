from __future__ import annotations

import logging

import pytest

from pgconfiguration.domain.models.param import Param
from pgconfiguration.infrastructure.exports import postgresql_conf
from pgconfiguration.infrastructure.exports.postgresql_conf import (
    read_header,
    render_key_value_text,
)


def test_render_key_value_text_groups_by_category() -> None:
    text = render_key_value_text(
        [
            (
                "Connections",
                [
                    Param(name="max_connections", category="Connections", value="100"),
                    Param(name="shared_buffers", category="Connections", value="128MB"),
                ],
            ),
            ("Locks", [Param(name="deadlock_timeout", category="Locks", value="1s")]),
        ],
        header="# header line 1\n# header line 2",
    )

    assert text == (
        "# header line 1\n"
        "# header line 2\n"
        "\n# Connections\n"
        "max_connections = 100\n"
        "shared_buffers = 128MB\n"
        "\n# Locks\n"
        "deadlock_timeout = 1s\n"
    )


def test_render_key_value_text_without_header() -> None:
    text = render_key_value_text(
        [("Memory", [Param(name="work_mem", category="Memory", value="1MB")])]
    )
    assert text == "\n# Memory\nwork_mem = 1MB\n"


def test_bundled_header_is_readable() -> None:
    header = read_header()
    assert header is not None
    assert "PostgreSQL configuration file" in header


def test_missing_header_logs_warning_and_returns_none(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    def _missing(name: str) -> str:
        raise FileNotFoundError(name)

    monkeypatch.setattr(postgresql_conf, "read_resource_text", _missing)

    with caplog.at_level(logging.WARNING):
        assert read_header() is None
    assert "postgresql.conf.header" in caplog.text
