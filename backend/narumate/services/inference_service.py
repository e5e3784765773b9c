"""
Inference service for the Hugging Face text-generation API.

Two request shapes are used:
1. Conversational payload (past inputs, prior responses, new text) for the
   DialoGPT chat models
2. Flattened prompt-and-parameters payload for everything else

Responses come back either as a conversation object or as a list of
generation objects; both are handled.
"""
import enum
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import httpx
from narumate.core.config import settings

logger = logging.getLogger(__name__)


class ModelKey(str, enum.Enum):
    """Selectable inference models."""
    CHAT = "CHAT"
    CONVERSATIONAL = "CONVERSATIONAL"
    SUPPORTIVE = "SUPPORTIVE"
    CREATIVE = "CREATIVE"


HF_MODELS = {
    ModelKey.CHAT: "microsoft/DialoGPT-medium",
    ModelKey.CONVERSATIONAL: "facebook/blenderbot-400M-distill",
    ModelKey.SUPPORTIVE: "microsoft/DialoGPT-large",
    ModelKey.CREATIVE: "gpt2-medium",
}

# Models that take the structured conversational payload
CONVERSATIONAL_PAYLOAD_MODELS = (ModelKey.CHAT, ModelKey.SUPPORTIVE)

CONTEXT_WINDOW = 6  # Messages kept when flattening history into a prompt

CREATIVE_PROMPTS = {
    "story": "Write a compelling story based on: ",
    "script": "Create a voice-over script for: ",
    "narration": "Write engaging narration for: ",
}


class InferenceError(Exception):
    """Raised for any failed or unusable generation call."""


def extract_generated_text(data: Any) -> str:
    """Return the first non-empty generated text from either response shape."""
    if isinstance(data, list):
        for item in data:
            if isinstance(item, dict) and item.get("generated_text"):
                return item["generated_text"]
        return ""

    if isinstance(data, dict):
        if data.get("error"):
            raise InferenceError(f"Hugging Face API error: {data['error']}")
        if data.get("generated_text"):
            return data["generated_text"]
        conversation = data.get("conversation") or {}
        for response in conversation.get("generated_responses") or []:
            if response:
                return response
        return ""

    raise InferenceError(f"Unexpected response type: {type(data).__name__}")


def build_prompt(messages: List[Dict[str, str]]) -> str:
    """Flatten the recent history into a Human/Assistant transcript."""
    lines = [
        f"{'Human' if m['role'] == 'user' else 'Assistant'}: {m['content']}"
        for m in messages[-CONTEXT_WINDOW:]
    ]
    return "\n".join(lines) + "\nAssistant:"


class Generator(ABC):
    """Text generation port used by the chat orchestrator."""

    @abstractmethod
    async def generate_chat(
        self,
        messages: List[Dict[str, str]],
        model: ModelKey = ModelKey.CHAT,
        temperature: float = 0.7,
        max_length: int = 1000
    ) -> str:
        """General chat reply for a role/content message history."""

    @abstractmethod
    async def generate_supportive(
        self,
        user_message: str,
        mood: Optional[str] = None,
        intensity: Optional[int] = None
    ) -> str:
        """Empathetic reply, optionally informed by today's mood."""

    @abstractmethod
    async def generate_creative(self, prompt: str, kind: str = "story") -> str:
        """Story, script or narration text."""

    @abstractmethod
    async def check_model_status(self, model: ModelKey) -> bool:
        """Whether the model endpoint answers."""


class HuggingFaceGenerator(Generator):
    """Generator backed by the Hugging Face inference API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.HUGGINGFACE_API_KEY
        self.base_url = (base_url or settings.HUGGINGFACE_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HUGGINGFACE_TIMEOUT
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _make_request(self, model: ModelKey, payload: Dict[str, Any]) -> Any:
        """POST the payload to the model endpoint and decode the JSON body."""
        url = f"{self.base_url}/{HF_MODELS[model]}"
        try:
            async with self._client() as client:
                response = await client.post(url, headers=self._headers(), json=payload)
        except httpx.HTTPError as e:
            raise InferenceError(f"Hugging Face request failed: {str(e)}") from e

        if not response.is_success:
            raise InferenceError(f"Hugging Face API error: {response.status_code} - {response.text}")

        try:
            return response.json()
        except ValueError as e:
            raise InferenceError("Hugging Face API returned invalid JSON") from e

    async def generate_chat(
        self,
        messages: List[Dict[str, str]],
        model: ModelKey = ModelKey.CHAT,
        temperature: float = 0.7,
        max_length: int = 1000
    ) -> str:
        """Generate a chat reply using the payload shape the model expects."""
        user_messages = [m["content"] for m in messages if m["role"] == "user"]
        assistant_messages = [m["content"] for m in messages if m["role"] == "assistant"]
        current_input = user_messages[-1] if user_messages else ""

        if model in CONVERSATIONAL_PAYLOAD_MODELS:
            payload = {
                "inputs": {
                    "past_user_inputs": user_messages[:-1],
                    "generated_responses": assistant_messages,
                    "text": current_input
                },
                "parameters": {
                    "max_length": max_length,
                    "temperature": temperature,
                    "top_p": 0.9,
                    "do_sample": True,
                    "pad_token_id": 50256,
                    "repetition_penalty": 1.1
                },
                "options": {
                    "wait_for_model": True,
                    "use_cache": False
                }
            }
        else:
            payload = {
                "inputs": build_prompt(messages),
                "parameters": {
                    "max_new_tokens": max_length,
                    "temperature": temperature,
                    "top_p": 0.9,
                    "do_sample": True,
                    "return_full_text": False,
                    "repetition_penalty": 1.1
                },
                "options": {
                    "wait_for_model": True,
                    "use_cache": False
                }
            }

        data = await self._make_request(model, payload)
        return extract_generated_text(data)

    async def generate_supportive(
        self,
        user_message: str,
        mood: Optional[str] = None,
        intensity: Optional[int] = None
    ) -> str:
        """Generate an empathetic reply with the user's mood as context."""
        mood_context = f"The user is feeling {mood} with intensity {intensity}/5. " if mood and intensity else ""
        payload = {
            "inputs": f'{mood_context}Please provide a supportive, empathetic response to: "{user_message}"',
            "parameters": {
                "max_new_tokens": 200,
                "temperature": 0.8,
                "top_p": 0.9,
                "do_sample": True,
                "repetition_penalty": 1.2
            },
            "options": {
                "wait_for_model": True
            }
        }
        data = await self._make_request(ModelKey.SUPPORTIVE, payload)
        return extract_generated_text(data)

    async def generate_creative(self, prompt: str, kind: str = "story") -> str:
        """Generate a story, voice-over script or narration."""
        prefix = CREATIVE_PROMPTS.get(kind, CREATIVE_PROMPTS["story"])
        payload = {
            "inputs": prefix + prompt,
            "parameters": {
                "max_new_tokens": 500,
                "temperature": 0.9,
                "top_p": 0.95,
                "do_sample": True,
                "repetition_penalty": 1.1
            },
            "options": {
                "wait_for_model": True
            }
        }
        data = await self._make_request(ModelKey.CREATIVE, payload)
        return extract_generated_text(data)

    async def check_model_status(self, model: ModelKey) -> bool:
        """Check if a model endpoint is reachable."""
        try:
            async with self._client() as client:
                response = await client.get(f"{self.base_url}/{HF_MODELS[model]}", headers=self._headers())
            return response.is_success
        except httpx.HTTPError as e:
            logger.warning(f"Model status check failed for {model.value}: {str(e)}")
            return False
