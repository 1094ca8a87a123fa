"""Whole-document JSON persistence.

The manifest and the undo stack are both stored as a single JSON document
that is loaded in full, mutated in memory and written back in full. This
module implements that cycle once, together with the policy that an
unreadable document means "no history": a missing, malformed or invalid
file is replaced by a fresh default instead of raising.

Writes go through a temporary file in the target directory followed by
os.replace(), so an interrupted write leaves the previous document intact.
There is no locking between processes; concurrent writers race and the
last one wins.
"""

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Decoder = Callable[[Any], T]
Encoder = Callable[[T], dict[str, Any]]


def load_document(path: Path, default: Callable[[], T], decode: Decoder[T]) -> T:
    """Load and decode a JSON document, falling back to a default.

    Args:
        path: Location of the JSON document.
        default: Factory for the empty document.
        decode: Converts parsed JSON into the typed document. Any
            ValueError, KeyError, TypeError or AttributeError it raises
            marks the file as corrupt.

    Returns:
        The decoded document, or default() if the file is missing or corrupt.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not path.exists():
        return default()

    raw = path.read_bytes()
    try:
        return decode(json.loads(raw))
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        # json.JSONDecodeError and pydantic.ValidationError are ValueErrors
        logger.warning("Ignoring corrupt document %s: %s", path, e)
        return default()


def save_document(path: Path, data: dict[str, Any]) -> Path:
    """Serialize a document to JSON and atomically replace the file.

    Args:
        path: Destination of the JSON document.
        data: JSON-serializable document.

    Returns:
        Path where the document was saved.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            f.write(payload.encode("utf-8"))
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    logger.debug("Saved %s", path)
    return path


def with_persisted_document(
    path: Path,
    default: Callable[[], T],
    mutate: Callable[[T], R],
    *,
    decode: Decoder[T],
    encode: Encoder[T],
) -> R:
    """Load a document, apply a mutation, and write the whole document back.

    The mutation receives the loaded (or default) document and changes it
    in place. Its return value is passed through to the caller. Nothing is
    written when the file does not exist and the mutation left the default
    document unchanged.

    Args:
        path: Location of the JSON document.
        default: Factory for the empty document.
        mutate: Callback that modifies the document in place.
        decode: Converts parsed JSON into the typed document.
        encode: Converts the typed document into JSON-serializable data.

    Returns:
        Whatever mutate returned.
    """
    existed = path.exists()
    document = load_document(path, default, decode)
    before = encode(document)

    result = mutate(document)

    after = encode(document)
    if existed or after != before:
        save_document(path, after)
    return result
