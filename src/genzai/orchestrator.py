"""Response orchestration.

Coordinates one request from the user's text to a finished transcript
entry: appends the user message and a placeholder, dispatches to the text
or image pipeline, converts failures into displayable text and always
finalizes the placeholder.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .backends.base import ImageSynthesizer, PromptEnhancer, TextGenerationBackend
from .config import GeminiModel
from .pipelines.classifier import ErrorClassifier
from .pipelines.image import ImageGenerationPipeline, ImageStage
from .pipelines.text import StreamingTextConsumer
from .transcript.models import Message
from .transcript.store import TranscriptStore

logger = logging.getLogger(__name__)


class RequestState(str, Enum):
    """Lifecycle of a single request."""

    IDLE = "idle"
    USER_APPENDED = "user_appended"
    PLACEHOLDER_APPENDED = "placeholder_appended"
    DISPATCHING = "dispatching"
    STREAMING = "streaming"
    IMAGE_ENHANCE = "image_enhance"
    IMAGE_SYNTHESIZE = "image_synthesize"
    COMPLETED = "completed"
    FAILED = "failed"
    FINALIZED = "finalized"


IMAGE_STATES = {
    ImageStage.ENHANCE: RequestState.IMAGE_ENHANCE,
    ImageStage.SYNTHESIZE: RequestState.IMAGE_SYNTHESIZE,
}


@dataclass
class SessionState:
    """UI flags for one chat session, owned by the caller."""

    selected_model: GeminiModel = GeminiModel.FLASH_2_5
    is_loading: bool = False
    sidebar_open: bool = False


class ResponseOrchestrator:
    """Top-level coordinator for chat requests.

    Hidden design decisions:
    - Pipeline selection from the model chosen at request start
    - The single place where failures are caught and classified
    - Finalization of the placeholder on every path

    Usage:
        orchestrator = ResponseOrchestrator(text_backend, synthesizer, enhancer)
        await orchestrator.send_message("Hello")
        print(orchestrator.store.last.text)
    """

    def __init__(
        self,
        text_backend: TextGenerationBackend,
        image_synthesizer: ImageSynthesizer,
        enhancer: PromptEnhancer | None = None,
        state: SessionState | None = None,
        store: TranscriptStore | None = None,
        classifier: ErrorClassifier | None = None,
    ):
        self.state = state or SessionState()
        self._backends = [b for b in (text_backend, image_synthesizer, enhancer) if b is not None]
        self.store = store or TranscriptStore()
        self._text = StreamingTextConsumer(text_backend, self.store)
        self._image = ImageGenerationPipeline(image_synthesizer, self.store, enhancer)
        self._classifier = classifier or ErrorClassifier()
        self._conversation = 0
        self.request_state = RequestState.IDLE

    async def close(self) -> None:
        """Close all backends."""
        for backend in self._backends:
            await backend.close()

    def select_model(self, model: GeminiModel) -> None:
        """Change the model used by subsequent requests."""
        self.state.selected_model = model

    async def send_message(self, text: str, model: GeminiModel | None = None) -> Message | None:
        """Answer ``text``, mutating the transcript as the answer arrives.

        Args:
            text: The user's message
            model: Model for this request (defaults to the session selection)

        Returns:
            The placeholder message that received the answer, or None if
            ``text`` was blank
        """
        if not text.strip():
            return None

        model = model or self.state.selected_model
        conversation = self._conversation
        history = self.store.history()

        self.store.append_user(text)
        self._enter(RequestState.USER_APPENDED, conversation)
        self.state.is_loading = True
        placeholder = self.store.append_placeholder(model.is_image_model)
        self._enter(RequestState.PLACEHOLDER_APPENDED, conversation)

        try:
            self._enter(RequestState.DISPATCHING, conversation)
            if model.is_image_model:
                await self._image.run(
                    text,
                    placeholder,
                    on_stage=lambda stage: self._enter(IMAGE_STATES[stage], conversation),
                )
            else:
                self._enter(RequestState.STREAMING, conversation)
                await self._text.consume(model.value, text, history, placeholder)
            self._enter(RequestState.COMPLETED, conversation)
        except Exception as e:
            self._enter(RequestState.FAILED, conversation)
            self._fail(placeholder, e, model.is_image_model)
        finally:
            self.store.finalize_last(placeholder)
            if conversation == self._conversation:
                self.state.is_loading = False
            self._enter(RequestState.FINALIZED, conversation)

        return placeholder

    def start_new_conversation(self) -> None:
        """Clear the transcript and reset the session flags.

        A request still pending from the old conversation keeps running,
        but its writes no longer reach the transcript.
        """
        self._conversation += 1
        self.store.clear()
        self.state.is_loading = False
        self.state.sidebar_open = False
        self.request_state = RequestState.IDLE

    def _fail(self, placeholder: Message, error: Exception, image_mode: bool) -> None:
        classified = self._classifier.classify(error, image_mode)

        def update(message: Message) -> None:
            message.text = classified.text
            message.is_generating_image = False

        self.store.mutate_last(placeholder, update)

    def _enter(self, state: RequestState, conversation: int) -> None:
        if conversation != self._conversation:
            return
        logger.debug("Request state: %s -> %s", self.request_state.value, state.value)
        self.request_state = state
