"""
Server entry point: wire settings, profiles, model loader, engines and the
audit log, then serve the HTTP API with uvicorn.
"""

from __future__ import annotations

import argparse
import uuid
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import uvicorn

from apps.server.audit import get_audit_writer
from apps.server.http import create_app
from apps.server.orchestrator import Orchestrator
from packages.config.settings import ServerSettings
from packages.config.store import ProfileStore
from packages.core.audit import AuditWriter
from packages.models import EngineRouter, ModelLoader, NullEngine


def load_profiles(store: ProfileStore, settings: ServerSettings, audit: AuditWriter) -> None:
    """
    Startup load: the multi-profile config file first (fatal if malformed),
    then every profile file in the models directory (bad files skipped).
    """
    from_file: List[str] = []
    if settings.config_file is not None:
        from_file = store.load_multi(settings.config_file)

    loaded: List[str] = []
    skipped: List[str] = []
    if settings.models_path.is_dir():
        res = store.load_directory(settings.models_path)
        loaded, skipped = res.loaded, res.skipped

    audit.append(
        uuid.uuid4().hex,
        "ProfilesLoaded",
        {
            "config_file": str(settings.config_file) if settings.config_file else None,
            "from_config_file": from_file,
            "from_models_path": loaded,
            "skipped": skipped,
        },
    )


def build_orchestrator(settings: ServerSettings, engines: Optional[EngineRouter] = None) -> Orchestrator:
    audit = get_audit_writer(settings)
    store = ProfileStore()
    load_profiles(store, settings, audit)

    if engines is None:
        engines = EngineRouter(default_kind="null")
        engines.register("null", NullEngine())

    loader = ModelLoader(settings.models_path)
    return Orchestrator(
        store=store,
        lister=loader,
        templates=loader,
        engines=engines,
        audit=audit,
        settings=settings,
    )


def parse_settings(argv: Optional[List[str]] = None) -> ServerSettings:
    base = ServerSettings.from_env()
    ap = argparse.ArgumentParser()
    ap.add_argument("--models-path", default=str(base.models_path), help="directory with models, templates and profiles")
    ap.add_argument("--config-file", default=str(base.config_file or ""), help="multi-profile YAML file")
    ap.add_argument("--threads", type=int, default=base.threads, help="force thread count on every request")
    ap.add_argument("--context-size", type=int, default=base.context_size, help="force context size on every request")
    ap.add_argument("--f16", action="store_true", default=base.f16, help="force half precision")
    ap.add_argument("--debug", action="store_true", default=base.debug, help="include prompts and samples in the audit log")
    ap.add_argument("--address", default=base.address, help="host:port to bind")
    ap.add_argument("--runtime", default=str(base.runtime_dir), help="runtime directory")
    args = ap.parse_args(argv)

    return replace(
        base,
        models_path=Path(args.models_path),
        config_file=Path(args.config_file) if args.config_file else None,
        threads=args.threads,
        context_size=args.context_size,
        f16=args.f16,
        debug=args.debug,
        address=args.address,
        runtime_dir=Path(args.runtime),
    )


def main() -> int:
    settings = parse_settings()
    app = create_app(build_orchestrator(settings))
    host, port = settings.host_port()
    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
