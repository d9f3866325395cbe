from app.agent.metadata_parsing import (
    MetadataContext,
    extract_largest_json_object,
    parse_image_metadata,
    parse_json_metadata,
    parse_regex_metadata,
    strip_code_fences,
)

CONTEXT = MetadataContext(character_id="mario", style="anime", variation=2)


def _parse(raw_text):
    return parse_image_metadata(raw_text, character_id="mario", style="anime", variation=2)


def test_fenced_json_is_parsed():
    metadata = _parse('```json\n{"title":"A","description":"B","tags":["x","y"]}\n```')

    assert metadata.model_dump() == {"title": "A", "description": "B", "tags": ["x", "y"]}


def test_unparsable_text_falls_back_to_template():
    metadata = _parse("not json at all")

    assert metadata.title == "mario - Variation 2"
    assert metadata.description
    assert "mario" in metadata.tags
    assert "anime" in metadata.tags


def test_empty_and_missing_text_fall_back_to_template():
    assert _parse("").tags == ["mario", "anime", "character", "ai-generated"]
    assert _parse(None).title == "mario - Variation 2"


def test_json_with_surrounding_prose_uses_largest_object():
    raw = (
        'Sure! Here is a draft {"title": "x"} and the final answer:\n'
        '{"title": "Leap of Joy", "description": "Mario mid-jump.", "tags": ["mario", "jump"]}\n'
        "Hope this helps."
    )

    metadata = _parse(raw)

    assert metadata.title == "Leap of Joy"
    assert metadata.description == "Mario mid-jump."
    assert metadata.tags == ["mario", "jump"]


def test_json_fields_are_validated_and_defaulted():
    raw = '{"title": "' + "T" * 80 + '", "description": 42, "tags": ["a", 3, null, "b"]}'

    metadata = parse_json_metadata(raw, CONTEXT)

    assert metadata is not None
    assert metadata.title == "T" * 60
    assert metadata.description == "A anime style artwork featuring mario in a dynamic pose."
    assert metadata.tags == ["a", "b"]


def test_json_without_tags_gets_default_tags():
    metadata = parse_json_metadata('{"title": "Hero", "description": "Brave"}', CONTEXT)

    assert metadata is not None
    assert metadata.tags == ["mario", "anime", "character", "ai-generated"]


def test_json_without_usable_fields_yields_nothing():
    assert parse_json_metadata('{"caption": "nope"}', CONTEXT) is None
    assert parse_json_metadata('["title", "description"]', CONTEXT) is None


def test_broken_json_falls_back_to_regex_extraction():
    raw = '{"title": "Rooftop Watch", "description": "Brooding hero", "tags": ["dark", "night", 7,]'

    metadata = _parse(raw)

    assert metadata.title == "Rooftop Watch"
    assert metadata.description == "Brooding hero"
    assert metadata.tags == ["dark", "night"]


def test_regex_extraction_fills_missing_fields():
    metadata = parse_regex_metadata('garbage "title": "Only a title" garbage', CONTEXT)

    assert metadata is not None
    assert metadata.title == "Only a title"
    assert metadata.description.startswith("A stunning anime style artwork featuring mario")
    assert metadata.tags == ["mario", "anime", "character", "ai-generated"]


def test_regex_extraction_with_empty_tags_uses_artwork_defaults():
    metadata = parse_regex_metadata('"description": "Calm", "tags": []', CONTEXT)

    assert metadata is not None
    assert metadata.title == "mario - anime Style"
    assert metadata.tags == ["mario", "anime", "character", "ai-generated", "artwork"]


def test_regex_extraction_without_matches_yields_nothing():
    assert parse_regex_metadata("title: plain words", CONTEXT) is None


def test_strip_code_fences_removes_inner_markers():
    assert strip_code_fences("prefix ```json {\"a\": 1} ``` suffix") == 'prefix  {"a": 1}  suffix'


def test_extract_largest_json_object_respects_strings():
    text = 'x {"a": "}"} y {"b": {"c": 1}, "d": 2} z'

    assert extract_largest_json_object(text) == '{"b": {"c": 1}, "d": 2}'
    assert extract_largest_json_object("no braces") is None
    assert extract_largest_json_object('{"unterminated": 1') is None


def test_deeply_nested_json_falls_back_to_regex_extraction():
    text = '{"title": "Deep", "x": ' + "[" * 100_000 + "]" * 100_000 + "}"

    metadata = _parse(text)

    assert metadata.title == "Deep"
    assert metadata.tags == ["mario", "anime", "character", "ai-generated"]


def test_extract_largest_json_object_skips_unmatched_braces():
    assert extract_largest_json_object('note { draft {"title": "A"} done') == '{"title": "A"}'
    assert extract_largest_json_object("{" * 50_000 + '{"title": "B"}') == '{"title": "B"}'
