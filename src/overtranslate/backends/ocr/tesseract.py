"""Tesseract OCR engine over live screen capture."""

from ... import log
from ...capture import ScreenCapture, bgra_to_rgb_pil
from ...errors import OCRError
from ...geometry import Rect
from ..base import OCRBackendInfo, OCREngine

logger = log.get_logger()

# Assume a uniform block of text
DEFAULT_TESSERACT_CONFIG = "--psm 6"


def clean_text(text: str) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not text:
        return ""
    return " ".join(text.split())


class TesseractOCREngine(OCREngine):
    """Captures a screen region with mss and recognizes it with Tesseract.

    Tesseract is a general-purpose OCR engine that works well with
    Latin-based scripts; other scripts need the matching traineddata
    installed and the corresponding language code.
    """

    def __init__(
        self,
        language: str = "eng",
        capture: ScreenCapture | None = None,
        tesseract_config: str = DEFAULT_TESSERACT_CONFIG,
    ):
        """Initialize the engine (Tesseract is checked lazily).

        Args:
            language: Tesseract language code, e.g. "eng" or "jpn".
            capture: Screen capture to grab regions with.
            tesseract_config: Extra command-line flags for Tesseract.
        """
        self._language = language
        self._capture = capture or ScreenCapture()
        self._tesseract_config = tesseract_config
        self._loaded = False

    @classmethod
    def get_info(cls) -> OCRBackendInfo:
        return OCRBackendInfo(
            id="tesseract",
            name="Tesseract",
            description="Screen capture via mss, recognition via Tesseract",
        )

    def load(self) -> None:
        """Verify Tesseract is available.

        Raises:
            OCRError: If Tesseract is not installed.
        """
        if self._loaded:
            return

        logger.info("loading tesseract", language=self._language)

        try:
            import pytesseract

            version = pytesseract.get_tesseract_version()
        except Exception as e:
            raise OCRError(
                "Tesseract OCR is not installed or not in PATH. "
                "Please install Tesseract: https://github.com/tesseract-ocr/tesseract"
            ) from e

        logger.info("tesseract ready", version=str(version), language=self._language)
        self._loaded = True

    def is_loaded(self) -> bool:
        return self._loaded

    def extract(self, region: Rect) -> str:
        if not self._loaded:
            self.load()

        import pytesseract

        frame = self._capture.grab(region)
        image = bgra_to_rgb_pil(frame)

        try:
            raw = pytesseract.image_to_string(
                image,
                lang=self._language,
                config=self._tesseract_config,
            )
        except pytesseract.TesseractError as e:
            raise OCRError(f"tesseract failed: {e}") from e

        text = clean_text(raw)
        if not text:
            raise OCRError(f"no text recognized in region {region}")

        logger.debug("ocr complete", region=str(region), chars=len(text))
        return text

    def close(self) -> None:
        self._capture.close()
