"""
mdBook preprocessor protocol adapter

mdBook runs a preprocessor with a JSON array ``[context, book]`` on stdin
and expects the (possibly modified) book as JSON on stdout. A book holds a
list of items under ``sections`` (``items`` in newer releases). Each item
is one of:

    {"Chapter": {"name": ..., "content": ..., "sub_items": [...], ...}}
    "Separator"
    {"PartTitle": "..."}

Only chapter ``content`` is touched; every other field passes through.
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO, Tuple

from ..models.errors import HostProtocolError
from .renderer import MathRenderer
from .log import LOG

PREPROCESSOR_NAME = "mathdown"
ITEM_KEYS = ("sections", "items")


def book_read(stream: TextIO) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Parse the ``[context, book]`` payload sent by mdBook

    Args:
        stream: Text stream holding the JSON payload (normally stdin)

    Returns:
        (context, book) dictionaries

    Raises:
        HostProtocolError: If the payload is not valid JSON or not a
                           two-element array of objects
    """
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as e:
        raise HostProtocolError(f"malformed preprocessor input: {e}") from e

    if not isinstance(payload, list) or len(payload) != 2:
        raise HostProtocolError("expected a JSON array of [context, book]")
    context, book = payload
    if not isinstance(context, dict) or not isinstance(book, dict):
        raise HostProtocolError("context and book must both be JSON objects")
    if not any(key in book for key in ITEM_KEYS):
        raise HostProtocolError("book has neither 'sections' nor 'items'")
    if not isinstance(bookItems_get(book), list):
        raise HostProtocolError("book item list must be a JSON array")
    return context, book


def book_write(book: Dict[str, Any], stream: TextIO) -> None:
    """Serialise ``book`` as JSON onto ``stream``."""
    json.dump(book, stream)


def bookItems_get(book: Dict[str, Any]) -> List[Any]:
    """Top-level item list of a book, whichever key the host used."""
    for key in ITEM_KEYS:
        if key in book:
            return book[key]
    return []


def chapters_walk(items: List[Any]) -> Iterator[Dict[str, Any]]:
    """
    Yield every chapter dict in ``items``, depth first

    Separators, part titles and anything else without a "Chapter" key are
    skipped.
    """
    for item in items:
        if not isinstance(item, dict) or "Chapter" not in item:
            continue
        chapter = item["Chapter"]
        if not isinstance(chapter, dict):
            raise HostProtocolError("chapter entry is not a JSON object")
        yield chapter
        sub_items = chapter.get("sub_items") or []
        if not isinstance(sub_items, list):
            raise HostProtocolError(f"sub_items of {chapter.get('name', '?')!r} is not a JSON array")
        yield from chapters_walk(sub_items)


def book_render(book: Dict[str, Any], renderer: MathRenderer) -> Dict[str, Any]:
    """
    Render math in every chapter of ``book``

    Args:
        book: Book object as received from mdBook
        renderer: Configured MathRenderer

    Returns:
        A new book with each chapter's content replaced; ``book`` itself is
        left unchanged
    """
    processed = copy.deepcopy(book)
    renderer.counters_reset()
    count = 0
    for chapter in chapters_walk(bookItems_get(processed)):
        content = chapter.get("content")
        if not isinstance(content, str):
            raise HostProtocolError(
                f"chapter {chapter.get('name', '?')!r} has no text content"
            )
        LOG(f"Rendering chapter {chapter.get('name', '?')!r}", level=2)
        chapter["content"] = renderer.document_render(content)
        count += 1
    LOG(
        f"Processed {count} chapters: {renderer.rendered_count} expressions rendered, "
        f"{renderer.fallback_count} left as text",
        level=1,
    )
    return processed


def context_macrosPath(context: Dict[str, Any]) -> Optional[Path]:
    """
    Macro file named in book.toml, if any

    Reads ``[preprocessor.mathdown] macros = "..."`` from the context config
    and resolves it against the book root.
    """
    config = context.get("config") or {}
    section = (config.get("preprocessor") or {}).get(PREPROCESSOR_NAME) or {}
    macros = section.get("macros")
    if not macros:
        return None
    return Path(context.get("root") or ".") / macros
