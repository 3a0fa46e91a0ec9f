"""Load (doc_id, text) documents from a directory. PDF text via pypdf."""

import logging
from io import BytesIO
from pathlib import Path
from typing import FrozenSet, List

from pypdf import PdfReader

from .. import config
from .document import Document

logger = logging.getLogger(__name__)


def _pdf_to_text(pdf_bytes: bytes) -> str:
    """Extract text from PDF bytes. Raises ValueError on failure."""
    try:
        reader = PdfReader(BytesIO(pdf_bytes))
        parts = [t for t in (page.extract_text() for page in reader.pages) if t and t.strip()]
    except Exception as e:
        raise ValueError(f"Could not read PDF: {e!s}") from e
    text = "\n".join(parts).strip()
    if not text:
        raise ValueError("No text could be extracted from this PDF (e.g. image-only or scanned).")
    return text


def load_documents(directory: Path, extensions: FrozenSet[str] = config.ALLOWED_EXTENSIONS) -> List[Document]:
    """Documents for every matching file in `directory` (sorted by name); id = file stem."""
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(str(directory))
    documents = []
    for f in sorted(directory.iterdir()):
        if not f.is_file() or f.suffix.lower() not in extensions:
            continue
        if f.suffix.lower() == ".pdf":
            content = _pdf_to_text(f.read_bytes())
        else:
            content = f.read_bytes().decode("utf-8", errors="replace")
        documents.append(Document(f.stem, content))
    logger.info("Loaded %d document(s) from %s", len(documents), directory)
    return documents
