import pytest

from tagging import (
    TAG_VOCABULARY,
    classify,
    extract_operands,
    severity,
    strategy_tag,
)


def test_extract_operands_reading_order():
    assert extract_operands("8 + 5") == (8, 5)
    assert extract_operands("What is 12 plus 3?") == (12, 3)
    assert extract_operands("only 7") is None
    assert extract_operands("") is None


@pytest.mark.parametrize("question,answer", [("7 + 3", 10), ("8 + 5", 13), ("6 + 6", 12)])
def test_correct_answer_has_no_tags(question, answer):
    assert classify(question, answer, answer) == []


@pytest.mark.parametrize("question", ["", "seven plus three", "7 +", "what is 5?"])
def test_unparseable_question(question):
    assert classify(question, 3, 10) == ["parse_error"]


def test_unparseable_question_wins_over_correct_answer():
    assert classify("no numbers here", 4, 4) == ["parse_error"]


# --- complement_miss ----------------------------------------------------------------


@pytest.mark.parametrize(
    "question,ua,ca",
    [("8 + 5", 12, 13), ("7 + 4", 10, 11), ("9 + 3", 11, 12)],
)
def test_complement_miss(question, ua, ca):
    assert "complement_miss" in classify(question, ua, ca)


def test_complement_miss_needs_sum_of_ten_or_more():
    assert "complement_miss" not in classify("4 + 2", 5, 6)


def test_one_short_of_ten_is_complement_miss_and_off_by_one():
    tags = classify("7 + 3", 9, 10)
    assert tags == ["complement_miss", "off_by_one"]


# --- doubles ------------------------------------------------------------------------


def test_double_miss_low():
    tags = classify("5 + 5", 9, 10)
    assert "double_miss_low" in tags
    assert "double_miss_high" not in tags


def test_double_miss_high():
    tags = classify("6 + 6", 13, 12)
    assert tags == ["double_miss_high", "off_by_one"]


def test_double_major_error_suppresses_counting_error():
    tags = classify("7 + 7", 10, 14)
    assert tags == ["complement_miss", "double_major_error"]


def test_double_off_by_two_gets_no_double_tag():
    assert classify("4 + 4", 6, 8) == []


# --- near doubles -------------------------------------------------------------------


def test_near_double_wrong_base():
    assert classify("6 + 7", 12, 13) == ["complement_miss", "near_double_wrong_base", "off_by_one"]


def test_near_double_wrong_double():
    tags = classify("7 + 6", 14, 13)
    assert "near_double_wrong_double" in tags
    assert "near_double_wrong_base" not in tags


def test_near_double_uses_smaller_double_first():
    tags = classify("4 + 5", 8, 9)
    assert tags[0] == "near_double_wrong_base"
    assert "near_double_off" not in tags


def test_near_double_off_fires_when_correct_answer_disagrees():
    # Caller-supplied correct answer differs from the question's sum
    tags = classify("4 + 5", 9, 10)
    assert "near_double_off" in tags


def test_near_double_three_apart_is_not_near_double():
    tags = classify("5 + 8", 10, 13)
    assert not any(t.startswith("near_double") for t in tags)


# --- incomplete / commutative -------------------------------------------------------


@pytest.mark.parametrize(
    "question,ua,ca", [("7 + 3", 7, 10), ("8 + 4", 4, 12), ("9 + 2", 9, 11)]
)
def test_incomplete_addition_and_commutative_confusion_together(question, ua, ca):
    tags = classify(question, ua, ca)
    assert "incomplete_addition" in tags
    assert "commutative_confusion" in tags
    assert tags.index("incomplete_addition") < tags.index("commutative_confusion")


def test_incomplete_addition_on_near_double():
    tags = classify("5 + 6", 6, 11)
    assert "incomplete_addition" in tags
    assert "near_double_off" not in tags  # 6 != 2*5 + 1


# --- magnitude checks ---------------------------------------------------------------


def test_counting_error():
    tags = classify("7 + 3", 6, 10)
    assert "counting_error" in tags
    assert "double_major_error" not in tags


@pytest.mark.parametrize("question,ua,ca", [("5 + 4", 1, 9), ("8 + 5", 3, 13)])
def test_counting_error_far_off(question, ua, ca):
    assert "counting_error" in classify(question, ua, ca)


def test_off_by_one():
    assert "off_by_one" in classify("7 + 3", 9, 10)
    assert "off_by_one" in classify("4 + 2", 7, 6)


def test_extreme_answers_do_not_raise():
    assert classify("3 + 4", -50, 7) == ["counting_error"]
    assert classify("3 + 4", 10**9, 7) == ["counting_error"]


def test_tags_are_unique_and_from_vocabulary():
    for ua in range(-3, 25):
        tags = classify("6 + 7", ua, 13)
        assert len(tags) == len(set(tags))
        assert set(tags) <= set(TAG_VOCABULARY)


def test_classify_is_deterministic():
    first = classify("6 + 7", 6, 13)
    assert classify("6 + 7", 6, 13) == first


# --- strategy -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "question,expected",
    [
        ("5 + 5", "doubles"),
        ("5 + 6", "near-double"),
        ("8 + 2", "make-10"),
        ("9 + 3", "complement"),
        ("2 + 7", "complement"),
        ("4 + 2", "basic-addition"),
        ("8 + 5", "basic-addition"),
        ("five plus five", "unknown"),
    ],
)
def test_strategy_tag(question, expected):
    assert strategy_tag(question) == expected


def test_strategy_priority_doubles_before_make_10():
    # 5 + 5 is a double and also makes 10
    assert strategy_tag("5 + 5") == "doubles"


# --- severity -----------------------------------------------------------------------


def test_severity_levels():
    assert severity([]) == "minor"
    assert severity(["off_by_one"]) == "minor"
    assert severity(["incomplete_addition"]) == "critical"
    assert severity(["double_major_error"]) == "critical"
    assert severity(["complement_miss"]) == "moderate"
    assert severity(["near_double_wrong_base", "off_by_one"]) == "moderate"
    assert severity(["near_double_wrong_double"]) == "minor"


def test_severity_critical_beats_moderate():
    assert severity(["complement_miss", "counting_error"]) == "critical"
