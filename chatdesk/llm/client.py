"""LLM client abstraction with Groq (primary) and Google AI (fallback)."""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, messages: list[dict], model: str) -> dict:
        """Return {"content": str, "finish_reason": str, "input_tokens": int, "output_tokens": int}."""
        ...

    @abstractmethod
    async def generate_stream(self, messages: list[dict], model: str) -> AsyncGenerator[dict, None]:
        """Yield {"type": "delta"|"finish", "content"?: str, "finish_reason"?: str, "usage"?: dict}."""
        ...


class GroqClient(LLMClient):
    def __init__(self, api_key: str):
        from groq import AsyncGroq
        self._client = AsyncGroq(api_key=api_key)

    async def generate(self, messages: list[dict], model: str) -> dict:
        response = await self._client.chat.completions.create(
            model=model,
            messages=messages,
        )
        choice = response.choices[0]
        return {
            "content": choice.message.content or "",
            "finish_reason": choice.finish_reason,
            "input_tokens": response.usage.prompt_tokens if response.usage else 0,
            "output_tokens": response.usage.completion_tokens if response.usage else 0,
        }

    async def generate_stream(self, messages: list[dict], model: str) -> AsyncGenerator[dict, None]:
        stream = await self._client.chat.completions.create(
            model=model,
            messages=messages,
            stream=True,
        )
        async for chunk in stream:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta
            if delta.content:
                yield {"type": "delta", "content": delta.content}
            if chunk.choices[0].finish_reason:
                usage = getattr(chunk, "x_groq", None) and chunk.x_groq.usage
                yield {
                    "type": "finish",
                    "finish_reason": chunk.choices[0].finish_reason,
                    "usage": {
                        "input_tokens": usage.prompt_tokens if usage else 0,
                        "output_tokens": usage.completion_tokens if usage else 0,
                    },
                }


class GoogleAIClient(LLMClient):
    def __init__(self, api_key: str):
        import google.generativeai as genai
        genai.configure(api_key=api_key)
        self._genai = genai

    def _convert_messages(self, messages: list[dict]) -> tuple[str | None, list[dict]]:
        """Convert OpenAI-style messages to Gemini format."""
        system = None
        history = []
        for msg in messages:
            if msg["role"] == "system":
                system = msg["content"]
            else:
                role = "user" if msg["role"] == "user" else "model"
                history.append({"role": role, "parts": [msg["content"]]})
        return system, history

    def _start_chat(self, messages: list[dict], model: str):
        system, history = self._convert_messages(messages)
        gen_model = self._genai.GenerativeModel(model, system_instruction=system)
        # Last message is the user prompt; history is everything before
        last = history[-1] if history else {"parts": [""]}
        return gen_model.start_chat(history=history[:-1]), last["parts"][0]

    async def generate(self, messages: list[dict], model: str) -> dict:
        chat, prompt = self._start_chat(messages, model)
        response = await chat.send_message_async(prompt)
        return {
            "content": response.text,
            "finish_reason": "stop",
            "input_tokens": response.usage_metadata.prompt_token_count if response.usage_metadata else 0,
            "output_tokens": response.usage_metadata.candidates_token_count if response.usage_metadata else 0,
        }

    async def generate_stream(self, messages: list[dict], model: str) -> AsyncGenerator[dict, None]:
        chat, prompt = self._start_chat(messages, model)
        response = await chat.send_message_async(prompt, stream=True)
        async for chunk in response:
            if chunk.text:
                yield {"type": "delta", "content": chunk.text}
        yield {
            "type": "finish",
            "finish_reason": "stop",
            "usage": {"input_tokens": 0, "output_tokens": 0},
        }


# One client per (provider, key); a key change in the settings table yields a new client
_clients: dict[tuple[str, str], LLMClient] = {}


def get_llm_client(provider: str, api_key: str) -> LLMClient:
    cache_key = (provider, api_key)
    if cache_key not in _clients:
        if provider == "groq":
            _clients[cache_key] = GroqClient(api_key)
        elif provider == "google":
            _clients[cache_key] = GoogleAIClient(api_key)
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")
    return _clients[cache_key]
