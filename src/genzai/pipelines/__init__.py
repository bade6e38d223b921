from .classifier import ClassifiedError, ErrorCategory, ErrorClassifier
from .image import ImageGenerationPipeline, ImageStage
from .text import StreamingTextConsumer

__all__ = [
    "ClassifiedError",
    "ErrorCategory",
    "ErrorClassifier",
    "ImageGenerationPipeline",
    "ImageStage",
    "StreamingTextConsumer",
]
