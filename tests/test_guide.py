from sanctuary.guide import GUIDE_ENTRIES, filter_guide, guide_entries, toggle_guide_favorite


def test_filters_by_search_category_and_difficulty():
    entries = guide_entries()
    assert [entry["id"] for entry in filter_guide(entries, search="EMBRACE")] == ["1"]
    assert [entry["id"] for entry in filter_guide(entries, search="spontaneity")] == ["3"]
    assert [entry["id"] for entry in filter_guide(entries, category="romantic")] == ["2"]
    assert [entry["id"] for entry in filter_guide(entries, difficulty="3")] == ["3"]
    assert filter_guide(entries, category="romantic", difficulty=1) == []
    assert len(filter_guide(entries)) == len(GUIDE_ENTRIES)


def test_favorite_toggle_is_local():
    entries = guide_entries()
    toggled = toggle_guide_favorite(entries, "1")
    assert toggled[0]["is_favorite"] is True
    assert [entry["is_favorite"] for entry in toggled[1:]] == [entry["is_favorite"] for entry in entries[1:]]
    assert GUIDE_ENTRIES[0]["is_favorite"] is False
