from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar, Union

from backend.app.inference.augmenter import build_inference_prompt
from backend.app.inference.notify import NotifierLike
from backend.app.inference.schema import CallEnvelope, InferenceRequest, Task, Tier
from backend.app.inference.selector import ConfigInput, select_techniques
from backend.app.inference.status import status_indicator
from backend.app.inference.wrapper import wrap_call

T = TypeVar("T")


async def run_inference(
    call: Callable[[str], Awaitable[T]],
    *,
    task: Union[Task, str],
    tier: Union[Tier, str],
    config: ConfigInput,
    prompt: str = "",
    context: Optional[Mapping[str, Any]] = None,
    notifier: NotifierLike = None,
) -> CallEnvelope[T]:
    """
    Select techniques for ``(task, tier, config)``, augment ``prompt`` and run
    ``call`` with the augmented prompt inside ``wrap_call``.

    Configuration and tier are passed on every call; nothing is cached between calls.
    """
    request = InferenceRequest(task=task, tier=tier, prompt=prompt, context=context)
    decision = select_techniques(request, config, tier)
    augmented = build_inference_prompt(prompt, decision)
    return await wrap_call(lambda: call(augmented), request, decision, notifier)


def inference_status(task: Union[Task, str], tier: Union[Tier, str], config: ConfigInput) -> str:
    decision = select_techniques(InferenceRequest(task=task, tier=tier), config, tier)
    return status_indicator(decision)


__all__ = ["run_inference", "inference_status"]
