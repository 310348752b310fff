import asyncio

import pytest
from pydantic import ValidationError

from backend.app.config import get_settings
from backend.app.inference.notify import CallbackNotifier, LogNotifier, as_notifier
from backend.app.inference.schema import (
    FIXED_CONFIDENCE,
    CallEnvelope,
    InferenceRequest,
    Task,
    TechniqueDecision,
    Tier,
    VerificationBadge,
)
from backend.app.inference.status import STANDARD_PROGRESS_MESSAGE
from backend.app.inference.wrapper import wrap_call
from backend.tests._inference_fixtures import RecordingNotifier

REQUEST = InferenceRequest(task=Task.CAMPAIGN_GEN, tier=Tier.PRO, prompt="Plan a launch")
ACTIVE = TechniqueDecision(
    use_speculative=True,
    use_skeleton_of_thought=True,
    use_chain_of_verification=True,
    num_samples=3,
)


def test_success_envelope_carries_decision_flags() -> None:
    notifier = RecordingNotifier()

    async def unit_of_work() -> str:
        return "campaign draft"

    envelope = asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE, notifier))
    assert isinstance(envelope, CallEnvelope)
    assert envelope.result == "campaign draft"
    assert envelope.used_speculative is True
    assert envelope.used_self_consistency is False
    assert envelope.used_skeleton_of_thought is True
    assert envelope.used_chain_of_verification is True
    assert envelope.confidence == FIXED_CONFIDENCE
    assert envelope.verification_badge == VerificationBadge.VERIFIED
    assert envelope.processing_ms >= 0
    assert notifier.kinds() == ["progress", "complete"]
    assert notifier.messages("progress")[0].startswith("Running inference with: ")
    assert notifier.messages("complete")[0].endswith(f"— {envelope.processing_ms}ms")


def test_unit_of_work_failure_propagates_same_error() -> None:
    notifier = RecordingNotifier()
    boom = RuntimeError("boom")
    calls = []

    async def unit_of_work() -> str:
        calls.append(1)
        raise boom

    with pytest.raises(RuntimeError) as excinfo:
        asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE, notifier))
    assert excinfo.value is boom
    assert len(calls) == 1
    assert notifier.messages("progress") == [notifier.calls[0][1]]
    assert notifier.kinds()[0] == "progress"
    assert notifier.messages("complete") == []
    assert notifier.messages("failed") == ["Inference error: boom"]


def test_no_active_technique_skips_summary() -> None:
    notifier = RecordingNotifier()

    async def unit_of_work() -> dict:
        return {"headline": "x"}

    envelope = asyncio.run(wrap_call(unit_of_work, REQUEST, TechniqueDecision(num_samples=3), notifier))
    assert envelope.verification_badge == VerificationBadge.NONE
    assert notifier.calls == [("progress", STANDARD_PROGRESS_MESSAGE)]


def test_result_object_is_not_mutated() -> None:
    payload = {"headline": "Launch"}

    async def unit_of_work() -> dict:
        return payload

    envelope = asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE))
    assert envelope.result is payload
    assert payload == {"headline": "Launch"}
    assert "verification_badge" in envelope.metadata()
    assert "result" not in envelope.metadata()


def test_progress_precedes_unit_of_work() -> None:
    order = []

    async def unit_of_work() -> str:
        order.append("call")
        await asyncio.sleep(0)
        return "ok"

    notifier = CallbackNotifier(
        on_progress=lambda m: order.append("progress"),
        on_complete=lambda m: order.append("complete"),
    )
    asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE, notifier))
    assert order == ["progress", "call", "complete"]


def test_bare_callable_receives_progress_only() -> None:
    seen = []

    async def unit_of_work() -> str:
        raise ValueError("bad key")

    with pytest.raises(ValueError):
        asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE, seen.append))
    assert len(seen) == 1
    assert seen[0].startswith("Running inference with: ")


def test_without_notifier_still_returns_envelope() -> None:
    async def unit_of_work() -> int:
        return 7

    envelope = asyncio.run(wrap_call(unit_of_work, REQUEST, TechniqueDecision()))
    assert envelope.result == 7
    assert envelope.metadata()["verification_badge"] == "none"


def test_elapsed_time_is_measured() -> None:
    async def unit_of_work() -> str:
        await asyncio.sleep(0.05)
        return "slow"

    envelope = asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE))
    assert envelope.processing_ms >= 40


def test_independent_calls_share_no_state() -> None:
    async def run_both():
        async def fast() -> str:
            return "fast"

        async def slow() -> str:
            await asyncio.sleep(0.01)
            return "slow"

        return await asyncio.gather(
            wrap_call(slow, REQUEST, ACTIVE),
            wrap_call(fast, REQUEST, TechniqueDecision()),
        )

    slow_env, fast_env = asyncio.run(run_both())
    assert slow_env.result == "slow" and slow_env.used_chain_of_verification is True
    assert fast_env.result == "fast" and fast_env.used_chain_of_verification is False


def test_metrics_can_be_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    emitted = []
    monkeypatch.setenv("INFERENCE_EMIT_METRICS", "0")
    monkeypatch.setattr("backend.app.inference.wrapper.counter", lambda *a, **k: emitted.append(a))

    async def unit_of_work() -> str:
        return "ok"

    asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE))
    assert emitted == []


def test_metrics_labels_use_known_values(monkeypatch: pytest.MonkeyPatch) -> None:
    emitted = []
    monkeypatch.setattr("backend.app.inference.wrapper.counter", lambda name, **k: emitted.append((name, k)))

    async def unit_of_work() -> str:
        raise RuntimeError("x")

    request = InferenceRequest(task="mystery", tier="pro")
    with pytest.raises(RuntimeError):
        asyncio.run(wrap_call(unit_of_work, request, TechniqueDecision()))
    assert emitted == [("inference.calls", {"labels": {"task": "unknown", "tier": "pro", "outcome": "error"}})]


def test_as_notifier_rejects_non_callables() -> None:
    assert as_notifier(None) is None
    log_sink = LogNotifier()
    assert as_notifier(log_sink) is log_sink
    with pytest.raises(TypeError):
        as_notifier(123)  # type: ignore[arg-type]


def test_log_notifier_redacts_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    logged = []
    monkeypatch.setattr("backend.app.inference.notify.structured_log", logged.append)
    LogNotifier().failed("Inference error: invalid key sk-abcdefghijklmnop")
    assert logged == [{"event": "inference.failed", "message": "Inference error: invalid key [redacted]"}]


def test_settings_resolved_before_unit_of_work(monkeypatch: pytest.MonkeyPatch) -> None:
    order = []

    def recording_settings():
        order.append("settings")
        return get_settings()

    monkeypatch.setattr("backend.app.inference.wrapper.get_settings", recording_settings)
    boom = RuntimeError("boom")

    async def unit_of_work() -> str:
        order.append("call")
        raise boom

    with pytest.raises(RuntimeError) as excinfo:
        asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE))
    assert excinfo.value is boom
    assert order == ["settings", "call"]


def test_invalid_metrics_setting_fails_before_call(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INFERENCE_EMIT_METRICS", "abc")
    calls = []

    async def unit_of_work() -> str:
        calls.append(1)
        raise RuntimeError("boom")

    with pytest.raises(ValidationError):
        asyncio.run(wrap_call(unit_of_work, REQUEST, ACTIVE))
    assert calls == []
