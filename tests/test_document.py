import zlib

import pytest

from pdfinject.document import PdfDocument, extract_stream
from pdfinject.objects import PdfObject
from pdfinject.xref import PdfFormatError


def make_document(pages_kids=b"[3 0 R 5 0 R]"):
    doc = PdfDocument(root_id=1)
    doc.put(PdfObject(1, b"<< /Type /Catalog /Pages 2 0 R >>"))
    doc.put(PdfObject(2, b"<< /Type /Pages /Kids " + pages_kids + b" /Count 2 >>"))
    doc.put(PdfObject(3, b"<< /Type /Page /Parent 2 0 R /Contents 4 0 R >>"))
    doc.put(PdfObject(4, b"<< /Length 3 >>\nstream\nq Q\nendstream"))
    doc.put(PdfObject(5, b"<< /Type /Page /Parent 2 0 R >>"))
    return doc


def test_len_counts_objects():
    doc = make_document()
    before = len(doc)
    doc.put(PdfObject(9, b"<< >>"))
    assert len(doc) == before + 1


def test_max_id():
    assert PdfDocument().max_id() == 0
    doc = make_document()
    doc.put(PdfObject(17, b"<< >>"))
    assert doc.max_id() == 17


def test_put_new_assigns_fresh_id():
    doc = make_document()
    original = PdfObject(3, b"<< /X 1 >>")
    previous = {obj.obj_id for obj in doc.objects}
    new_id = doc.put_new(original)
    assert new_id not in previous
    assert new_id > max(previous)
    assert doc.get(new_id).data == b"<< /X 1 >>"
    assert original.obj_id == 3


def test_remove():
    doc = make_document()
    doc.remove(5)
    assert doc.get(5) is None
    with pytest.raises(KeyError):
        doc.remove(5)


def test_get_missing_returns_none():
    assert make_document().get(99) is None


def test_get_prefers_object_with_annots():
    doc = PdfDocument()
    plain = PdfObject(3, b"<< /Type /Page >>")
    annotated = PdfObject(3, b"<< /Type /Page /Annots [7 0 R] >>")
    doc.put(plain)
    doc.put(annotated)
    assert doc.get(3) is annotated


def test_get_duplicate_without_annots_returns_first():
    doc = PdfDocument()
    first = PdfObject(3, b"<< /A 1 >>")
    doc.put(first)
    doc.put(PdfObject(3, b"<< /B 2 >>"))
    assert doc.get(3) is first


def test_page_ids_flat():
    assert make_document().page_ids() == [3, 5]


def test_page_ids_nested():
    doc = make_document(pages_kids=b"[6 0 R 5 0 R]")
    doc.put(PdfObject(6, b"<< /Type /Pages /Parent 2 0 R /Kids [3 0 R] /Count 1 >>"))
    assert doc.page_ids() == [3, 5]


def test_page_ids_skips_non_pages():
    doc = make_document(pages_kids=b"[3 0 R 4 0 R 5 0 R]")
    assert doc.page_ids() == [3, 5]


def test_page_ids_without_root():
    with pytest.raises(PdfFormatError):
        PdfDocument(root_id=1).page_ids()


def test_stream_length_number():
    doc = make_document()
    assert doc.stream_length(doc.get(4).data) == 3


def test_stream_length_indirect():
    doc = make_document()
    doc.put(PdfObject(8, b"\n 42 \n"))
    assert doc.stream_length(b"<< /Length 8 0 R >>\nstream\n") == 42


def test_stream_length_falls_back_to_length1():
    doc = PdfDocument()
    assert doc.stream_length(b"<< /Length1 12 >>\nstream\n") == 12


def test_stream_length_missing():
    with pytest.raises(PdfFormatError):
        PdfDocument().stream_length(b"<< /Filter /FlateDecode >>\nstream\n")


def test_extract_stream_plain():
    data = b"<< /Length 3 >>\nstream\nq Q\nendstream"
    assert extract_stream(data, 3, False) == b"q Q"


def test_extract_stream_compressed_round_trip():
    content = b"BT /F1 12 Tf (hello) Tj ET"
    packed = zlib.compress(content)
    data = b"<< /Filter /FlateDecode >>\nstream\n" + packed + b"\nendstream"
    assert extract_stream(data, len(packed), True) == content


def test_extract_stream_without_stream_keyword():
    with pytest.raises(PdfFormatError):
        extract_stream(b"<< /A 1 >>", 0, False)