import base64
import binascii
import os
import re
from io import BytesIO
from pathlib import Path
from pdfminer.high_level import extract_text as pdf_extract
from docx import Document
from skillmatch.utils.exceptions import ProcessingError, ValidationError

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))  # 10MB

def read_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")

def read_docx(data: bytes) -> str:
    doc = Document(BytesIO(data))
    return "\n".join([p.text for p in doc.paragraphs])

def read_pdf(data: bytes) -> str:
    return pdf_extract(BytesIO(data))

READERS = {
    ".txt": read_txt,
    ".pdf": read_pdf,
    ".docx": read_docx,
}

def clean_text(x: str) -> str:
    # keep line structure: name and section extraction work line by line
    lines = (re.sub(r'[ \t\f\v\xa0]+', ' ', line).strip() for line in x.splitlines())
    return "\n".join(line for line in lines if line)

def decode_base64(b64_string: str) -> bytes:
    try:
        return base64.b64decode(b64_string, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 document: {e}", field="base64_content") from e

def extract_document_text(filename: str, data: bytes) -> str:
    """Plain text of an uploaded resume, dispatched on the file extension"""
    if len(data) > MAX_UPLOAD_BYTES:
        raise ValidationError(
            f"Document exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit",
            field="base64_content", value=len(data)
        )

    ext = Path(filename).suffix.lower()
    if ext == ".doc":
        raise ValidationError("Legacy DOC format not supported. Please use DOCX format.", field="filename", value=filename)
    reader = READERS.get(ext)
    if reader is None:
        raise ValidationError(f"Unsupported file type: {ext or 'none'}", field="filename", value=filename)

    try:
        return clean_text(reader(data))
    except Exception as e:
        raise ProcessingError(
            f"Failed to parse document: {e}", document_id=filename, document_type=ext.lstrip("."), cause=e
        ) from e
