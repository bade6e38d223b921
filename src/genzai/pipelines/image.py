"""Two-stage image generation pipeline.

Hidden design decisions:
- Prompt enhancement is best effort and never blocks synthesis
- The transcript shows the user's own words, not the enhanced prompt
- A successful call without an image counts as a failure
"""

import logging
from collections.abc import Callable
from enum import Enum

from ..backends.base import ImageSynthesizer, PromptEnhancer
from ..backends.errors import EmptyImageResultError, ImageSynthesisError
from ..transcript.models import Message
from ..transcript.store import TranscriptStore
from .classifier import ErrorCategory

logger = logging.getLogger(__name__)

IMAGE_RESULT_TEMPLATE = 'Here is the generated image for: "{text}"'


class ImageStage(str, Enum):
    """Stage reported by ``ImageGenerationPipeline.run`` before it starts."""

    ENHANCE = "enhance"
    SYNTHESIZE = "synthesize"


class ImageGenerationPipeline:
    """Enhance the prompt, synthesize the image, attach it to the placeholder."""

    def __init__(
        self,
        synthesizer: ImageSynthesizer,
        store: TranscriptStore,
        enhancer: PromptEnhancer | None = None,
    ):
        self._synthesizer = synthesizer
        self._store = store
        self._enhancer = enhancer

    async def enhance(self, text: str) -> str:
        """Return an enhanced prompt, or ``text`` itself if enhancement fails."""
        if self._enhancer is None:
            return text
        try:
            enhanced = await self._enhancer.enhance(text)
        except Exception as e:
            logger.info("Background enhancer skipped (%s): %s", ErrorCategory.ENHANCEMENT_FAILURE.value, e)
            return text
        return enhanced or text

    async def synthesize(self, prompt: str) -> str:
        """Generate the image for ``prompt``.

        Raises:
            ImageSynthesisError: If the backend failed
            EmptyImageResultError: If the backend returned no image
        """
        try:
            image = await self._synthesizer.synthesize(prompt)
        except ImageSynthesisError:
            raise
        except Exception as e:
            raise ImageSynthesisError.from_error(e) from e

        if not image:
            raise EmptyImageResultError()
        return image

    async def run(
        self,
        text: str,
        target: Message,
        on_stage: Callable[[ImageStage], None] | None = None,
    ) -> str:
        """Run both stages for ``text`` and fill ``target``.

        Args:
            text: The user's original text
            target: Placeholder that receives the image
            on_stage: Called with each stage just before it starts

        Returns:
            The image data URI
        """
        if on_stage:
            on_stage(ImageStage.ENHANCE)
        prompt = await self.enhance(text)
        if on_stage:
            on_stage(ImageStage.SYNTHESIZE)
        image = await self.synthesize(prompt)
        self.attach(text, image, target)
        return image

    def attach(self, text: str, image: str, target: Message) -> bool:
        """Write the result into ``target``, captioned with the original ``text``."""
        def update(message: Message) -> None:
            message.text = IMAGE_RESULT_TEMPLATE.format(text=text)
            message.attach_image(image)

        return self._store.mutate_last(target, update)
