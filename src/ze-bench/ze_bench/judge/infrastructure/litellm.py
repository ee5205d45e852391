"""LiteLLMJudge — judge implementation using LiteLLM for structured rubric scoring."""

import time
from typing import Any

import litellm
from pydantic import ValidationError

from ze_bench.cache.domain.result_cache import CacheNamespace, ResultCache, cache_key
from ze_bench.core.errors import UnparseableJsonError
from ze_bench.core.json_repair import looks_truncated, repair_json
from ze_bench.core.run_context import RunContext
from ze_bench.judge.domain.observer import JudgeObserver
from ze_bench.judge.domain.verdict import JudgeVerdict
from ze_bench.judge.infrastructure.errors import (
    InvalidJudgeVerdictError,
    JudgeInvocationError,
    UnparseableJudgeOutputError,
)

litellm.suppress_debug_info = True

JUDGE_VERDICTS: CacheNamespace[JudgeVerdict] = CacheNamespace("judge")

_SYSTEM_PROMPT = """\
You are a strict senior reviewer grading the work of an autonomous coding agent. \
You grade only what the evidence in the user message shows; you never assume work \
was done because the agent claims it was. You respond with a single JSON object \
and nothing else: no markdown fences, no commentary before or after it.\
"""


class LiteLLMJudge:
    """Judge implementation that delegates to an LLM via LiteLLM.

    Requests a JSON object, repairs truncated output, validates it into a
    JudgeVerdict, and memoizes verdicts in the ResultCache keyed by model,
    temperature and prompt.
    """

    def __init__(
        self,
        model: str,
        temperature: float,
        observer: JudgeObserver,
        cache: ResultCache,
        max_tokens: int | None = None,
        api_key: str | None = None,
    ) -> None:
        self.model = model
        self._api_key = api_key
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._observer = observer
        self._verdicts = cache.namespace(JUDGE_VERDICTS)

    async def score(self, prompt: str, context: RunContext) -> JudgeVerdict:
        """Invoke the LLM judge and return a validated JudgeVerdict.

        Raises:
            JudgeInvocationError: if the LLM call fails.
            UnparseableJudgeOutputError: if the output is not JSON even after repair.
            InvalidJudgeVerdictError: if the JSON does not match the verdict schema.
        """
        key = cache_key(self.model, str(self._temperature), prompt)
        cached = self._verdicts.get(key)
        if cached is not None:
            self._observer.judge_cache_hit(context=context, model=self.model)
            return cached

        self._observer.judge_scoring_started(
            context=context, model=self.model, prompt_chars=len(prompt)
        )

        kwargs: dict[str, Any] = {
            "model": self.model,
            "temperature": self._temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": _SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        if self._max_tokens is not None:
            kwargs["max_tokens"] = self._max_tokens
        if self._api_key is not None:
            kwargs["api_key"] = self._api_key

        start = time.monotonic()
        try:
            response = await litellm.acompletion(**kwargs)
        except Exception as exc:
            reason = str(exc)
            self._observer.judge_scoring_failed(context=context, model=self.model, reason=reason)
            raise JudgeInvocationError(reason=reason) from exc

        duration_ms = int((time.monotonic() - start) * 1000)
        raw_content: str = response.choices[0].message.content or ""

        try:
            verdict = self._parse(raw_content=raw_content, context=context)
        except JudgeInvocationError as exc:
            self._observer.judge_scoring_failed(context=context, model=self.model, reason=str(exc))
            raise

        self._verdicts.set(key, verdict)
        self._observer.judge_scoring_completed(
            context=context,
            model=self.model,
            duration_ms=duration_ms,
            normalized_score=verdict.normalized_score,
        )
        return verdict

    def _parse(self, raw_content: str, context: RunContext) -> JudgeVerdict:
        if looks_truncated(raw_content):
            self._observer.judge_output_truncated(
                context=context, model=self.model, raw_chars=len(raw_content)
            )
        try:
            data = repair_json(raw_content)
        except UnparseableJsonError as exc:
            raise UnparseableJudgeOutputError(reason=str(exc)) from exc
        try:
            return JudgeVerdict.model_validate(data)
        except ValidationError as exc:
            raise InvalidJudgeVerdictError(reason=_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    )
