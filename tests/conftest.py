from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, List

import pytest


def pytest_configure() -> None:
    """
    Ensure `src/` is importable when running pytest without installing the package.
    """
    project_root = Path(__file__).resolve().parents[1]
    src_dir = project_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def sample_params() -> List[tuple]:
    return [
        ("shared_buffers", "Resource Usage / Memory", "128MB"),
        ("port", "Connections", "5432"),
        ("max_connections", "Connections", "100"),
        ("work_mem", "Resource Usage / Memory", "1MB"),
        ("autovacuum", "Autovacuum Parameters", "on"),
    ]


@pytest.fixture
def write_document(tmp_path: Path) -> Callable[..., Path]:
    """写入 postgresql.json：params 为 (name, category, value) 三元组列表。"""

    def _write(params: List[tuple], *, data_dir: Path = tmp_path, **sections: Any) -> Path:
        data_dir.mkdir(parents=True, exist_ok=True)
        path = data_dir / "postgresql.json"
        document = {
            "postgresqlconf": [
                {"param": name, "category": category, "value": value}
                for name, category, value in params
            ],
            **sections,
        }
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write
