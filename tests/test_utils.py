from job_aggregator.utils import extract_tags, normalize_text, posting_id, to_iso


def test_to_iso_epoch_millis():
    assert to_iso(1704067200000) == "2024-01-01T00:00:00+00:00"
    assert to_iso("1704067200000") == "2024-01-01T00:00:00+00:00"


def test_to_iso_strings():
    assert to_iso("2024-01-02T03:04:05Z") == "2024-01-02T03:04:05+00:00"
    assert to_iso("2024-01-02T03:04:05-04:00") == "2024-01-02T07:04:05+00:00"
    assert to_iso("2024-01-02") == "2024-01-02T00:00:00+00:00"
    assert to_iso("Tue, 02 Jan 2024 03:04:05 GMT") == "2024-01-02T03:04:05+00:00"


def test_to_iso_unparseable_is_none():
    assert to_iso("not a date") is None
    assert to_iso("") is None
    assert to_iso(None) is None
    assert to_iso(True) is None
    assert to_iso({"when": 1}) is None
    assert to_iso(0) is None


def test_to_iso_out_of_range_is_none():
    assert to_iso("0001-01-01T00:00:00+14:00") is None
    assert to_iso("9999-12-31T23:00:00-05:00") is None


def test_extract_tags_lowercase_unique_capped():
    tags = extract_tags("Senior Python Engineer", "Remote / Berlin, DE", "senior")
    assert tags == ["senior", "python", "engineer", "remote", "berlin", "de"]

    many = extract_tags(" ".join(f"w{i}" for i in range(30)))
    assert len(many) == 15


def test_normalize_text():
    assert normalize_text("&lt;p&gt;Hello   <b>World</b>&lt;/p&gt;") == "hello world"


def test_posting_id_is_deterministic():
    assert posting_id("lever", "acme", "abc") == "lever:acme:abc"
