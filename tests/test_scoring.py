from listing.extraction import scoring


def test_position_score_is_non_increasing():
    scores = [scoring.position_score(position) for position in range(15)]

    assert scores[0] == 10
    assert scores[3] == 7
    assert scores[12] == 0
    assert all(earlier >= later for earlier, later in zip(scores, scores[1:]))


def test_length_score():
    assert scoring.length_score("Blue Bottle") == 5
    assert scoring.length_score("Golden Gate Bakery") == 4
    assert scoring.length_score("Starbucks") == 3
    assert scoring.length_score("Cafe") == 0
    assert scoring.length_score("A B C D") == 0


def test_format_score():
    assert scoring.format_score("JOE'S COFFEE") == 5
    assert scoring.format_score("Blue Bottle") == 2
    assert scoring.format_score("123 MAIN") == 0
    assert scoring.format_score("blue") == 0


def test_keyword_score_uses_first_listed_keyword():
    assert scoring.keyword_score("Joe's Coffee Shop") == 7
    assert scoring.keyword_score("Food Park Eats") == 8
    assert scoring.keyword_score("Sidebar Books") == 4
    assert scoring.keyword_score("Nothing Here") == 0


def test_completeness_and_penalties():
    assert scoring.completeness_score("x" * 8) == 3
    assert scoring.completeness_score("x" * 25) == 3
    assert scoring.completeness_score("x" * 7) == 0
    assert scoring.completeness_score("x" * 26) == 0
    assert scoring.length_penalty("Abc") == 3
    assert scoring.length_penalty("x" * 41) == 5
    assert scoring.length_penalty("Blue Bottle") == 0


def test_score_business_name():
    assert scoring.score_business_name("JOE'S COFFEE SHOP", 0) == 29.0
    assert scoring.score_business_name("ab", 9) == 0.0
    assert scoring.score_business_name("x" * 45, 0) == 8.0


def test_candidate_position():
    lines = ["JOE'S", "Open", "Daily"]

    assert scoring.candidate_position("Open Daily", lines) == 1
    assert scoring.candidate_position("Nope", lines) == 0
