# pdfinject

`pdfinject` opens an existing PDF file, changes its list of pages and writes
a new PDF file. It reads the cross-reference table and the trailer, keeps
every object as it was found, and rebuilds the page tree entries and the xref
table when you save.

It can:

- count the pages of a document, following nested page trees;
- duplicate a page (together with its content stream) and place the copy at
  any position;
- remove a page;
- parse JPEG and PNG images, splitting a PNG alpha channel into a soft mask,
  and render them as PDF image objects;
- build a ToUnicode CMap stream from a character-to-glyph map;
- compute the standard RC4 40-bit encryption values and per-object keys.

## Installation

```
pip install pdfinject
```

Python 3.10 or later is required. The only dependency is Pillow.

## Editing pages

```python
from pdfinject.editor import PdfEditor

editor = PdfEditor()
editor.open("form.pdf")

print(editor.page_count())

# Copy page 1 (pages are counted from 1) and insert the copy after
# page index 0, i.e. right after the first page.
editor.duplicate_page_after(1, 0)

# Remove the last page.
editor.remove_page(editor.page_count())

editor.save("form-edited.pdf")
```

The `position` given to `duplicate_page_after` is a 0-based page index and
the copy is inserted after it; a negative value counts from the end.

`open_from` takes a binary file object or the PDF bytes themselves,
`save_to` writes to a binary file object, and `to_bytes` returns the finished
document:

```python
import io

with open("form.pdf", "rb") as fh:
    editor = PdfEditor()
    editor.open_from(fh)

out = io.BytesIO()
editor.save_to(out)
data = editor.to_bytes()
```

The parsed document is available as `editor.document`, a
`pdfinject.document.PdfDocument`.

Malformed input (no `xref`, `trailer`, `startxref` or `/Root`, a broken
object) raises `pdfinject.xref.PdfFormatError`, a subclass of `ValueError`.
Asking for a page number that does not exist raises `IndexError`.
`page_count` returns 0 when the page tree cannot be read.

## Lower-level pieces

- `pdfinject.parser.parse_pdf` turns raw bytes or a binary stream into a
  `PdfDocument`; `parse_xref` and `parse_trailer` read the xref entries and
  the root object id.
- `pdfinject.document.PdfDocument` holds the objects in file order and gives
  `get`, `put`, `put_new`, `remove`, `max_id`, `page_ids` and
  `stream_length`; `extract_stream` returns a stream's bytes, inflated when
  asked.
- `pdfinject.objects.PdfObject` holds an object id and its raw body;
  `read_properties`, `set_properties` and `encrypt` work on that body.
- `pdfinject.properties.read_properties` reads the `/Key value` pairs of an
  object dictionary; `property_kind` tells a nested dictionary, an array, a
  number and an indirect reference apart, and `read_reference` /
  `read_reference_array` read `id gen R` references.
- `pdfinject.imageinfo.parse_image` reads a JPEG or PNG file into an
  `ImageInfo`, and `build_image_properties` writes the start of its image
  dictionary.
- `pdfinject.image.image_from_bytes` and `image_from_base64` create an
  `ImageObject` together with its `SMask`, or `None` when the image has no
  alpha channel; `image_holder_from_bytes` and `image_holder_from_path` pair
  image bytes with a cache identifier.
- `pdfinject.glyphs.GlyphMap` keeps characters in insertion order with their
  glyph indexes, and `build_to_unicode_cmap` writes the matching ToUnicode
  stream object.
- `pdfinject.fontutil` has TrueType helpers: `check_sum`, `read_short`,
  `read_ushort`, `embedded_font_subset_name` and `parse_style`.
- `pdfinject.protection.Protection` derives the `/O`, `/U` and `/P` values
  and the per-object RC4 keys; `rc4` is the cipher itself.

```python
from pdfinject.protection import Permission, Protection

prot = Protection(Permission.PRINT | Permission.COPY, b"password", b"secret")
key = prot.object_key(4)
```

## What it does not do

- `PdfEditor` edits the page list only. It does not insert text, embed
  fonts, or place images on a page; the image and glyph modules produce
  object bodies but nothing adds them to a document's pages for you.
- `to_bytes` always writes an unencrypted file. `PdfObject.encrypt` and
  `Protection` are there to build protected output yourself.
- Only files with a classic `xref` table are read; cross-reference streams
  are not supported.
- There is no command-line program.

## Running the tests

```
pip install "pdfinject[test]"
pytest
```