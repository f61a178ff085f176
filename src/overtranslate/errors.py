"""Error types raised by the capture, OCR and translation pipeline."""


class ConfigError(ValueError):
    """Raised when a configuration value is out of bounds or malformed."""


class PipelineError(Exception):
    """Base class for errors that abort a single pipeline run.

    A pipeline error never terminates the process or touches overlay state;
    it only ends the run it was raised in.
    """

    stage = "pipeline"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message or self.__class__.__name__


class VerificationFailed(PipelineError):
    """The translation provider was judged unusable before any work started."""

    stage = "verifying"


class OCRError(PipelineError):
    """Capture or recognition failed, or produced no usable text."""

    stage = "capturing"


class TranslationError(PipelineError):
    """Network, authentication or provider-side failure during translation."""

    stage = "translating"
