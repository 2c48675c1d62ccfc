from casebook.content.pagination import offset_for, page_meta, paginated


def test_page_meta_middle_page():
    meta = page_meta(total_items=25, page=2, limit=10)
    assert meta.total_pages == 3
    assert meta.has_next_page is True
    assert meta.has_prev_page is True


def test_page_meta_last_and_empty():
    last = page_meta(total_items=25, page=3, limit=10)
    assert last.has_next_page is False

    empty = page_meta(total_items=0, page=1, limit=10)
    assert empty.total_pages == 0
    assert empty.has_next_page is False
    assert empty.has_prev_page is False


def test_page_beyond_end_has_no_next():
    meta = page_meta(total_items=5, page=4, limit=10)
    assert meta.total_pages == 1
    assert meta.has_next_page is False
    assert meta.has_prev_page is True


def test_offset_and_envelope():
    assert offset_for(1, 10) == 0
    assert offset_for(3, 20) == 40
    body = paginated(["a", "b"], 12, 1, 2)
    assert body["items"] == ["a", "b"]
    assert body["total_pages"] == 6
    assert body["items_per_page"] == 2
