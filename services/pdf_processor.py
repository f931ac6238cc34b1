import io
import PyPDF2
import re
import logging

from services.errors import PDFExtractionError

logger = logging.getLogger(__name__)

IMAGE_PDF_HINT = (
    "Please try with a PDF that contains selectable text, or use OCR software "
    "to convert image-based PDFs to text-based ones."
)
DAMAGED_PDF_HINT = (
    "Please ensure the PDF file is not corrupted, password-protected, or damaged. "
    "Try with a different PDF file."
)


class PDFProcessor:
    def __init__(self):
        # Line breaks are kept so upper-case section headers survive
        self.text_cleaning_patterns = [
            (r'[ \t\f\v]+', ' '),  # Runs of horizontal whitespace to one space
            (r' *\n *', '\n'),  # Trim spaces around line breaks
            (r'\n{3,}', '\n\n'),  # At most one blank line
        ]

    def extract_text(self, data: bytes) -> str:
        """
        Extract text from PDF bytes
        """
        try:
            pdf_reader = PyPDF2.PdfReader(io.BytesIO(data))
            pages = [page.extract_text() or "" for page in pdf_reader.pages]
        except Exception as e:
            logger.error(f"Error extracting text from PDF: {str(e)}")
            raise PDFExtractionError("Failed to process PDF file", detail=str(e),
                                     suggestion=DAMAGED_PDF_HINT) from e

        cleaned_text = self.clean_text("\n".join(pages))
        if cleaned_text and '\n' not in cleaned_text:
            cleaned_text = self.reflow_text(cleaned_text)
        if not cleaned_text:
            raise PDFExtractionError(
                "No text found in PDF",
                detail="The PDF appears to contain no extractable text. This usually happens "
                       "with image-based PDFs or scanned documents.",
                suggestion=IMAGE_PDF_HINT,
            )

        logger.info(f"Extracted {len(cleaned_text)} characters from {len(pages)} PDF pages")
        return cleaned_text

    def clean_text(self, text: str) -> str:
        """
        Clean and normalize extracted text
        """
        text = text.replace('\r\n', '\n').replace('\r', '\n')
        for pattern, replacement in self.text_cleaning_patterns:
            text = re.sub(pattern, replacement, text)

        return text.strip()

    def reflow_text(self, text: str) -> str:
        """
        Rebuild line structure for text that arrived flattened onto one line,
        breaking after sentences, after years and before bullets.
        """
        text = re.sub(r'\s+', ' ', text)
        text = re.sub(r'([.!?])\s*([A-Z])', r'\1\n\n\2', text)
        text = re.sub(r'(\d{4})\s*([A-Z][a-z]+)', r'\1\n\2', text)
        text = text.replace('•', '\n• ')
        return text.strip()
