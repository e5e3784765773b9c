"""
Tests for the Hugging Face inference client.
"""
import asyncio
import json
import httpx
import pytest
from narumate.services.inference_service import (
    HF_MODELS, HuggingFaceGenerator, InferenceError, ModelKey,
    build_prompt, extract_generated_text
)

BASE_URL = "https://hf.test/models"


def make_generator(handler, api_key="hf_test"):
    return HuggingFaceGenerator(
        api_key=api_key,
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(handler)
    )


class Recorder:
    """MockTransport handler that records requests and replays a response."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body if body is not None else [{"generated_text": "Hi there!"}]
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def payload(self):
        return json.loads(self.requests[-1].content)


HISTORY = [
    {"role": "user", "content": "Hi"},
    {"role": "assistant", "content": "Hello!"},
    {"role": "user", "content": "How are you?"},
]


def test_extract_generated_text_shapes():
    """Both response shapes yield the generated text."""
    assert extract_generated_text([{"generated_text": "one"}]) == "one"
    assert extract_generated_text([{"generated_text": ""}, {"generated_text": "two"}]) == "two"
    assert extract_generated_text({"generated_text": "three"}) == "three"
    assert extract_generated_text({"conversation": {"generated_responses": ["four"]}}) == "four"
    assert extract_generated_text([]) == ""


def test_extract_generated_text_errors():
    """Error objects and unexpected types raise."""
    with pytest.raises(InferenceError):
        extract_generated_text({"error": "Model is currently loading"})
    with pytest.raises(InferenceError):
        extract_generated_text("plain text")


def test_build_prompt_keeps_recent_turns():
    """Only the last six messages make it into the prompt."""
    messages = [{"role": "user", "content": f"m{n}"} for n in range(8)]
    prompt = build_prompt(messages)

    assert "m0" not in prompt and "m1" not in prompt
    assert prompt.startswith("Human: m2")
    assert prompt.endswith("\nAssistant:")


def test_chat_uses_conversational_payload():
    """DialoGPT chat models get past inputs and prior responses."""
    recorder = Recorder(body={"conversation": {"generated_responses": ["Doing well!"]}})
    generator = make_generator(recorder)

    reply = asyncio.run(generator.generate_chat(HISTORY, model=ModelKey.CHAT, temperature=0.7))

    assert reply == "Doing well!"
    request = recorder.requests[0]
    assert str(request.url) == f"{BASE_URL}/{HF_MODELS[ModelKey.CHAT]}"
    assert request.headers["Authorization"] == "Bearer hf_test"
    inputs = recorder.payload["inputs"]
    assert inputs == {
        "past_user_inputs": ["Hi"],
        "generated_responses": ["Hello!"],
        "text": "How are you?"
    }
    assert recorder.payload["parameters"]["temperature"] == 0.7


def test_chat_uses_flattened_prompt_for_other_models():
    """Other models get a Human/Assistant transcript."""
    recorder = Recorder()
    generator = make_generator(recorder)

    reply = asyncio.run(generator.generate_chat(HISTORY, model=ModelKey.CONVERSATIONAL, temperature=0.8))

    assert reply == "Hi there!"
    payload = recorder.payload
    assert payload["inputs"].startswith("Human: Hi\nAssistant: Hello!\nHuman: How are you?")
    assert payload["parameters"]["return_full_text"] is False
    assert payload["parameters"]["temperature"] == 0.8


def test_no_authorization_header_without_key():
    """Anonymous calls send no bearer token."""
    recorder = Recorder()
    generator = make_generator(recorder, api_key="")

    asyncio.run(generator.generate_chat(HISTORY))
    assert "Authorization" not in recorder.requests[0].headers


def test_supportive_includes_mood_context():
    """Today's mood is woven into the supportive prompt."""
    recorder = Recorder()
    generator = make_generator(recorder)

    asyncio.run(generator.generate_supportive("I feel overwhelmed", mood="stressed", intensity=4))

    payload = recorder.payload
    assert str(recorder.requests[0].url).endswith(HF_MODELS[ModelKey.SUPPORTIVE])
    assert payload["inputs"].startswith("The user is feeling stressed with intensity 4/5.")
    assert '"I feel overwhelmed"' in payload["inputs"]


def test_creative_prompt_prefix():
    """Creative requests are prefixed by kind."""
    recorder = Recorder()
    generator = make_generator(recorder)

    asyncio.run(generator.generate_creative("a lighthouse keeper", kind="script"))
    assert recorder.payload["inputs"] == "Create a voice-over script for: a lighthouse keeper"

    asyncio.run(generator.generate_creative("a lighthouse keeper", kind="unknown"))
    assert recorder.payload["inputs"].startswith("Write a compelling story based on: ")


def test_error_status_raises():
    """Non-2xx responses become InferenceError."""
    generator = make_generator(Recorder(status_code=503, body={"error": "loading"}))
    with pytest.raises(InferenceError):
        asyncio.run(generator.generate_chat(HISTORY))


def test_error_body_raises():
    """A 200 with an error object is still a failure."""
    generator = make_generator(Recorder(body={"error": "Model is overloaded"}))
    with pytest.raises(InferenceError):
        asyncio.run(generator.generate_creative("anything"))


def test_transport_error_raises():
    """Network failures become InferenceError."""
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    generator = make_generator(handler)
    with pytest.raises(InferenceError):
        asyncio.run(generator.generate_chat(HISTORY))


def test_check_model_status():
    """Status is True for a reachable model and False on failure."""
    assert asyncio.run(make_generator(Recorder()).check_model_status(ModelKey.CHAT)) is True
    assert asyncio.run(make_generator(Recorder(status_code=404)).check_model_status(ModelKey.CHAT)) is False

    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    assert asyncio.run(make_generator(handler).check_model_status(ModelKey.CREATIVE)) is False
