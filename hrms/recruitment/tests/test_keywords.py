from hrms.recruitment.keywords import extract_keywords


def test_stop_words_and_short_words_are_dropped():
    assert extract_keywords("The lead of the API team for Lagos") == [
        "lead",
        "team",
        "lagos",
    ]


def test_keywords_are_lowercased_and_repeats_kept():
    assert extract_keywords("Python python PYTHON") == ["python"] * 3


def test_empty_description():
    assert extract_keywords("") == []
