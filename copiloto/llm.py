# chat completion calls (OpenAI-compatible endpoint)
import logging
from functools import partial
from typing import Callable, Dict, List, Optional

import requests

from .config import LLM_MODEL, LLM_TIMEOUT, LLM_URL, Settings
from .errors import CollaboratorError

logger = logging.getLogger(__name__)

Message = Dict[str, str]
ChatFn = Callable[..., str]


def system_user(system: str, user: str) -> List[Message]:
    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def chat_completion(
    messages: List[Message],
    temperature: float = 0.0,
    *,
    url: str = LLM_URL,
    model: str = LLM_MODEL,
    api_key: Optional[str] = None,
    timeout: int = LLM_TIMEOUT,
) -> str:
    """
    One chat completion call. Returns the stripped message content, which
    may be empty; callers decide what an empty answer means.
    No retries: every failure surfaces as CollaboratorError.
    """
    headers = {"content-type": "application/json"}
    if api_key:
        headers["authorization"] = f"Bearer {api_key}"

    try:
        r = requests.post(
            f"{url}/chat/completions",
            headers=headers,
            json={"model": model, "temperature": temperature, "messages": messages},
            timeout=timeout,
        )
    except requests.RequestException as exc:
        logger.warning("chat endpoint unreachable: %s", exc)
        raise CollaboratorError(f"chat endpoint unreachable: {exc}") from exc

    if not r.ok:
        logger.warning("chat endpoint error %s", r.status_code)
        raise CollaboratorError(f"chat endpoint error {r.status_code}: {r.text[:500]}", status=r.status_code)

    try:
        content = r.json()["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise CollaboratorError("chat endpoint returned a malformed response", status=r.status_code) from exc

    if not isinstance(content, str):
        raise CollaboratorError("chat endpoint returned no text content", status=r.status_code)
    return content.strip()


def make_chat(settings: Settings) -> ChatFn:
    return partial(
        chat_completion,
        url=settings.llm_url,
        model=settings.llm_model,
        api_key=settings.llm_api_key,
        timeout=settings.llm_timeout,
    )
