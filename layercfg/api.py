"""
Optional HTTP admin surface over a file-backed layer stack.

Not part of the config store itself: the store, views and INI codec never
import it. Serves local inspection and editing only; it does not distribute
configuration between processes.
"""

from __future__ import annotations
from typing import Optional
from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse

from .errors import ConfigError
from .files import FileLayerStore
from .ini import dumps_ini
from .keys import KeyList
from .logging_setup import get_logger
from .models import ActionResult, ValueBody, ValueResult
from .settings import Settings
from . import __version__

log = get_logger("layercfg.api")


def create_app(settings: Settings, store: Optional[FileLayerStore] = None) -> FastAPI:
    app = FastAPI(title="layercfg API", version=__version__)
    if store is None:
        store = FileLayerStore.from_settings(settings)
    stack = store.stack

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.get("/layers")
    def layers():
        return {
            "ok": True,
            "writable": stack.is_writable(),
            "layers": [{"name": layer.name, "writable": layer.is_writable()} for layer in stack.layers()],
        }

    @app.get("/keys")
    def keys(prefix: str = "", direct: bool = Query(default=False, description="Only immediate child segments")):
        out = KeyList()
        stack.list_keys(prefix, out, direct)
        return {"ok": True, "prefix": prefix, "keys": sorted(out)}

    @app.get("/values/{key:path}", response_model=ValueResult)
    def get_value(key: str):
        value = stack.get_string(key)
        if value is None:
            raise HTTPException(status_code=404, detail="key_not_found")
        return ValueResult(key=key, value=value)

    @app.put("/values/{key:path}", response_model=ValueResult)
    def put_value(key: str, body: ValueBody):
        try:
            stack.set_string(key, body.value)
        except ConfigError as e:
            raise HTTPException(status_code=409, detail=str(e))
        log.info("Set %s via API", key)
        return ValueResult(key=key, value=body.value)

    @app.post("/save", response_model=ActionResult)
    def save():
        try:
            written = store.save()
        except OSError as e:
            raise HTTPException(status_code=500, detail=str(e))
        return ActionResult(ok=True, detail=", ".join(str(p) for p in written) or "nothing to save")

    @app.get("/export", response_class=PlainTextResponse)
    def export():
        return dumps_ini(stack, header=True, sort_keys=True)

    return app
