from __future__ import annotations
import argparse
import sys
import uvicorn
from .settings import Settings
from .logging_setup import setup_logging, get_logger
from .errors import ConfigError
from .files import FileLayerStore
from .ini import save_ini
from .keys import KeyList
from .api import create_app

log = get_logger("layercfg.cli")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="layercfg")
    sub = parser.add_subparsers(dest="cmd", required=True)

    get_p = sub.add_parser("get", help="Print the resolved value of a key")
    get_p.add_argument("key")

    set_p = sub.add_parser("set", help="Write a key to the writable layer and save it")
    set_p.add_argument("key")
    set_p.add_argument("value")

    keys_p = sub.add_parser("keys", help="List keys (union over all layers)")
    keys_p.add_argument("--prefix", default="")
    keys_p.add_argument("--direct", action="store_true", help="Only immediate child segments")

    dump_p = sub.add_parser("dump", help="Print the resolved config as INI")
    dump_p.add_argument("--no-header", action="store_true", help="Omit the autogenerated comment header")

    api_p = sub.add_parser("api", help="Run REST API (FastAPI)")
    api_p.add_argument("--host", default=None)
    api_p.add_argument("--port", type=int, default=None)

    args = parser.parse_args(argv)
    settings = Settings()
    setup_logging(settings)

    try:
        store = FileLayerStore.from_settings(settings)
    except (OSError, ValueError) as e:
        log.error("Failed to load configuration: %s", e)
        return 1
    stack = store.stack

    if args.cmd == "get":
        value = stack.get_string(args.key)
        if value is None:
            log.error("Key not found: %s", args.key)
            return 1
        print(value)
        return 0

    if args.cmd == "set":
        try:
            stack.set_string(args.key, args.value)
        except ConfigError as e:
            log.error("Cannot set %s: %s", args.key, e)
            return 1
        store.save()
        return 0

    if args.cmd == "keys":
        out = KeyList()
        stack.list_keys(args.prefix, out, args.direct)
        for key in sorted(out):
            print(key)
        return 0

    if args.cmd == "dump":
        save_ini(stack, sys.stdout, header=not args.no_header, sort_keys=True)
        return 0

    if args.cmd == "api":
        app = create_app(settings, store)
        uvicorn.run(app, host=args.host or settings.api_host, port=args.port or settings.api_port,
                    log_level=settings.log_level.lower())
        return 0

    return 2
