from job_aggregator.summarize import safe_truncate, summarize_html


def test_list_items_become_bullets():
    html = "<p>About us</p><ul><li>Build APIs</li><li>Write tests</li></ul>"
    assert summarize_html(html) == ["Build APIs", "Write tests"]


def test_bullets_are_capped():
    html = "<ul>" + "".join(f"<li>Item {i}</li>" for i in range(7)) + "</ul>"
    assert summarize_html(html) == [f"Item {i}" for i in range(5)]
    assert summarize_html(html, max_bullets=2) == ["Item 0", "Item 1"]


def test_encoded_and_double_encoded_markup():
    assert summarize_html("&lt;ul&gt;&lt;li&gt;One&lt;/li&gt;&lt;/ul&gt;") == ["One"]
    assert summarize_html("&amp;lt;li&amp;gt;One&amp;lt;/li&amp;gt;") == ["One"]


def test_sentence_fallback_prefers_key_sentences():
    text = "We are a company. You will build things. Lunch is free."
    assert summarize_html(text) == ["You will build things."]


def test_sentence_fallback_without_key_sentences():
    assert summarize_html("<p>Hello there. Nice day.</p>") == ["Hello there.", "Nice day."]


def test_items_are_truncated_with_ellipsis():
    out = summarize_html("<li>" + "a" * 300 + "</li>")
    assert len(out[0]) == 160
    assert out[0].endswith("…")


def test_truncation_keeps_combining_marks_with_base():
    s = "e" * 158 + "e\u0301" + "x" * 10
    assert safe_truncate(s, 160) == "e" * 158 + "…"


def test_empty_input():
    assert summarize_html("") == []
    assert summarize_html("<div></div>") == []
