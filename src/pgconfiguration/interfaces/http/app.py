"""
HTTP 接口层（FastAPI）

薄适配层：每个请求直接调用 ConfigurationStore 的一个操作，
“不存在”映射为 404，落盘失败映射为 500。
"""

from __future__ import annotations

import logging
import threading
from typing import List

from fastapi import FastAPI, HTTPException, Response
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from pgconfiguration.application.configuration_store import ConfigurationStore
from pgconfiguration.domain.models.param import Param
from pgconfiguration.shared.errors import PersistenceError

logger = logging.getLogger(__name__)


class ParamOut(BaseModel):
    param: str
    category: str
    value: str

    @classmethod
    def from_param(cls, param: Param) -> "ParamOut":
        return cls(**param.to_dict())


class ParamValueIn(BaseModel):
    value: str


def create_app(store: ConfigurationStore) -> FastAPI:
    app = FastAPI(title="pgconfiguration", version="0.1.0")
    # ConfigurationStore 的修改操作需要调用方串行化
    mutation_lock = threading.Lock()

    @app.get("/pgdata", response_class=PlainTextResponse)
    def get_pgdata() -> str:
        return store.get_data_dir_path()

    @app.get("/params")
    def list_params() -> List[str]:
        return sorted(store.get_param_names())

    @app.get("/params/{name}")
    def get_param(name: str) -> ParamOut:
        param = store.get_param(name)
        if param is None:
            raise HTTPException(status_code=404, detail=f"参数不存在：{name}")
        return ParamOut.from_param(param)

    @app.put("/params/{name}")
    def set_param(name: str, body: ParamValueIn) -> ParamOut:
        try:
            with mutation_lock:
                previous = store.set_param(name, body.value)
        except PersistenceError as e:
            logger.error(f"参数 {name} 已修改但未能持久化: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e)) from e
        if previous is None:
            raise HTTPException(status_code=404, detail=f"参数不存在：{name}")
        return ParamOut.from_param(previous)

    @app.get("/categories")
    def list_categories() -> List[str]:
        return sorted(store.get_categories())

    @app.get("/categories/{category}")
    def list_category_params(category: str) -> List[str]:
        names = store.get_param_names_by_category(category)
        if names is None:
            raise HTTPException(status_code=404, detail=f"分类不存在：{category}")
        return names

    @app.get("/postgresql.conf", response_class=PlainTextResponse)
    def export_postgresql_conf() -> str:
        return store.to_key_value_text()

    @app.post("/persist", status_code=204)
    def persist() -> Response:
        try:
            with mutation_lock:
                store.persist()
        except PersistenceError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
        return Response(status_code=204)

    return app
