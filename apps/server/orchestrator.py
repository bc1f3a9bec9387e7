"""
Request pipeline: model selection -> config resolution -> templating ->
inference (N samples) -> post-processing -> response envelope.
Every stage is recorded in the audit log under one request id.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Any, Dict, List

from packages.api.responses import build_choices, build_model_list, build_prompt, build_response
from packages.config.resolver import ConfigResolver
from packages.config.settings import ServerSettings
from packages.config.store import ProfileStore
from packages.core.audit import AuditWriter
from packages.core.codec import stable_sha256
from packages.core.errors import (
    ConfigParseError,
    InferenceError,
    NoModelError,
    RequestValidationError,
)
from packages.core.types import CompletionRequest, RequestResult
from packages.inference.invoker import generate
from packages.inference.postprocess import PatternCache, postprocess
from packages.inference.templates import apply_template, template_key
from packages.models.interfaces import ModelLister, TemplateExpander
from packages.models.router import EngineRouter

ERROR_KINDS = {
    NoModelError: "no_model",
    RequestValidationError: "invalid_request",
    ConfigParseError: "config",
    InferenceError: "inference",
}


def _error_kind(e: Exception) -> str:
    for cls, kind in ERROR_KINDS.items():
        if isinstance(e, cls):
            return kind
    return "internal"


class Orchestrator:
    def __init__(
        self,
        *,
        store: ProfileStore,
        lister: ModelLister,
        templates: TemplateExpander,
        engines: EngineRouter,
        audit: AuditWriter,
        settings: ServerSettings,
        patterns: PatternCache | None = None,
    ) -> None:
        self._store = store
        self._lister = lister
        self._templates = templates
        self._engines = engines
        self._audit = audit
        self._settings = settings
        self._patterns = patterns or PatternCache()
        self._resolver = ConfigResolver(store=store, lister=lister, settings=settings)

    @property
    def store(self) -> ProfileStore:
        return self._store

    @property
    def engines(self) -> EngineRouter:
        return self._engines

    @property
    def patterns(self) -> PatternCache:
        return self._patterns

    def handle(self, request: CompletionRequest, *, chat: bool, bearer: str = "") -> RequestResult:
        request_id = uuid.uuid4().hex
        received: Dict[str, Any] = {
            "chat": chat,
            "model": request.model,
            "n": request.n,
            "bearer_present": bool(bearer),
        }
        if self._settings.debug:
            received["request"] = asdict(request)
        self._audit.append(request_id, "RequestReceived", received)

        try:
            response = self._run(request_id, request, chat=chat, bearer=bearer)
        except Exception as e:
            err = f"{e.__class__.__name__}: {e}"
            kind = _error_kind(e)
            self._audit.append(request_id, "RequestFailed", {"error": err, "kind": kind})
            return RequestResult(request_id=request_id, ok=False, error=err, error_kind=kind)

        self._audit.append(
            request_id,
            "RequestCompleted",
            {"id": response["id"], "choices": len(response["choices"])},
        )
        return RequestResult(request_id=request_id, ok=True, response=response)

    def _run(self, request_id: str, request: CompletionRequest, *, chat: bool, bearer: str) -> Dict[str, Any]:
        resolution = self._resolver.resolve(request, bearer)
        config = resolution.config
        debug = self._settings.debug or config.debug

        self._audit.append(
            request_id,
            "ModelSelected",
            {"requested": request.model, "model": resolution.model, "from_bearer": bool(bearer) and resolution.model == bearer},
        )
        if resolution.companion_loaded:
            self._audit.append(
                request_id,
                "CompanionConfigLoaded",
                {"model": resolution.model, "profiles": resolution.companion_loaded},
            )

        resolved: Dict[str, Any] = {"model": config.model, "config_hash": stable_sha256(config)}
        if debug:
            resolved["config"] = asdict(config)
        self._audit.append(request_id, "ConfigResolved", resolved)

        # Profile prompt/messages stand in when the request carries none.
        if chat:
            prompt = build_prompt(request.messages or config.messages, config.roles)
        else:
            prompt = request.prompt or config.prompt
        key = template_key(config, chat)
        prompt, applied, rejected = apply_template(self._templates, config, prompt, chat)
        templated: Dict[str, Any] = {"template": key, "applied": applied}
        if rejected is not None:
            templated["rejected"] = rejected
        if debug:
            templated["input"] = prompt
        self._audit.append(request_id, "TemplateApplied", templated)

        def on_sample(i: int, sample: str) -> None:
            payload: Dict[str, Any] = {"index": i, "chars": len(sample)}
            if debug:
                payload["text"] = sample
            self._audit.append(request_id, "SampleGenerated", payload)

        predict = self._engines.create_inference(prompt, config)
        samples = generate(predict, request.n, on_sample=on_sample)

        cleaned: List[str] = [postprocess(s, config, prompt, self._patterns) for s in samples]
        return build_response(request.model, build_choices(cleaned, chat), chat)

    def list_models(self) -> Dict[str, Any]:
        return build_model_list(self._lister.list_models(), self._store.names())

