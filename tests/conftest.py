"""Pytest configuration and shared fixtures."""
import asyncio

import pytest

from genzai.backends import (
    BackendError,
    ChunkStream,
    ImageSynthesizer,
    PromptEnhancer,
    ResponseChunk,
    TextGenerationBackend,
)
from genzai.orchestrator import ResponseOrchestrator, SessionState

SAMPLE_IMAGE = "data:image/png;base64,iVBORw0KGgo="


class FakeTextBackend(TextGenerationBackend):
    """Text backend replaying scripted chunks.

    ``error`` is raised after all chunks were yielded; ``start_error`` is
    raised before streaming begins. With ``pause_after`` set, the stream
    sets ``paused`` after that many chunks and waits for ``gate``.
    """

    def __init__(self, chunks=(), error=None, start_error=None, pause_after=None):
        self.chunks = list(chunks)
        self.error = error
        self.start_error = start_error
        self.pause_after = pause_after
        self.paused = asyncio.Event()
        self.gate = asyncio.Event()
        self.calls = []
        self.delivered = 0
        self.closed = False

    async def stream_response(self, model, text, history):
        self.calls.append((model, text, history))
        if self.start_error is not None:
            raise self.start_error
        return ChunkStream(self._generate())

    async def _generate(self):
        for index, chunk in enumerate(self.chunks):
            await self._maybe_pause(index)
            await asyncio.sleep(0)
            self.delivered += 1
            yield chunk
        await self._maybe_pause(len(self.chunks))
        if self.error is not None:
            raise self.error

    async def _maybe_pause(self, index):
        if index == self.pause_after:
            self.paused.set()
            await self.gate.wait()

    async def close(self):
        self.closed = True


class FakeEnhancer(PromptEnhancer):
    def __init__(self, result="enhanced prompt", error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def enhance(self, text):
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.result

    async def close(self):
        pass


class FakeSynthesizer(ImageSynthesizer):
    def __init__(self, image=SAMPLE_IMAGE, error=None):
        self.image = image
        self.error = error
        self.prompts = []
        self.closed = False

    async def synthesize(self, prompt):
        self.prompts.append(prompt)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        return self.image

    async def close(self):
        self.closed = True


@pytest.fixture
def sample_image():
    return SAMPLE_IMAGE


@pytest.fixture
def text_backend():
    """Backend streaming a short greeting with grounding data."""
    return FakeTextBackend(chunks=[
        ResponseChunk(text="Hel"),
        ResponseChunk(text="lo"),
        ResponseChunk(grounding_metadata={"m": 1}),
    ])


@pytest.fixture
def enhancer():
    return FakeEnhancer()


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def make_orchestrator():
    """Build an orchestrator from (possibly fake) backends."""
    def _make(text_backend=None, synthesizer=None, enhancer=None, state=None):
        return ResponseOrchestrator(
            text_backend=text_backend or FakeTextBackend(),
            image_synthesizer=synthesizer or FakeSynthesizer(),
            enhancer=enhancer,
            state=state or SessionState(),
        )
    return _make


@pytest.fixture(scope="session")
def fakes():
    """Access to the fake backend classes."""
    class _Fakes:
        TextBackend = FakeTextBackend
        Enhancer = FakeEnhancer
        Synthesizer = FakeSynthesizer
        BackendError = BackendError
    return _Fakes
