from job_aggregator.extract import extract_degree, extract_requirements, extract_seniority


def test_min_years_keeps_smallest_match():
    req = extract_requirements("<p>5+ years experience... 2 years experience required</p>")
    assert req.min_years == 2


def test_min_years_loose_window_and_abbreviations():
    assert extract_requirements("At least 3 yrs of relevant exp").min_years == 3
    assert extract_requirements("7 years in a fast-paced setting with hands-on experience").min_years == 7


def test_min_years_does_not_cross_sentence_boundary():
    assert extract_requirements("Founded 10 years ago. Experience with Go is a plus").min_years is None


def test_min_years_none_without_phrase():
    assert extract_requirements("We value curiosity").min_years is None


def test_degree_resolves_to_lowest_accepted_tier():
    req = extract_requirements("PhD preferred. Bachelor's required.")
    assert req.degree == "bachelors"


def test_degree_phd_or_ms_is_masters():
    assert extract_degree("phd or ms in computer science") == "masters"


def test_degree_no_degree_wins_over_phd():
    assert extract_degree("phd welcome, but no degree required") == "none"


def test_degree_only_phd():
    assert extract_requirements("A doctorate in physics").degree == "phd"


def test_degree_reads_encoded_markup():
    req = extract_requirements("&lt;li&gt;Master&#39;s degree in statistics&lt;/li&gt;")
    assert req.degree == "masters"


def test_degree_none_when_absent():
    assert extract_requirements("Great team, great snacks").degree is None


def test_seniority_first_match_by_precedence():
    assert extract_seniority("senior engineer joining the staff platform team") == "staff"
    assert extract_seniority("senior lead engineer") == "senior"
    assert extract_seniority("principal or junior welcome") == "principal"


def test_seniority_mid_and_intern():
    assert extract_seniority("junior or mid-level developers") == "mid"
    assert extract_seniority("summer internship program") == "intern"


def test_seniority_single_value_and_nullable():
    req = extract_requirements("<h2>Junior Developer</h2>")
    assert req.seniority == "junior"
    assert extract_requirements("").seniority is None
