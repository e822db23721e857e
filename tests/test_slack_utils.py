import pytest

from utils.slack_utils import extract_thread_reference, permalink_to_ts


def test_permalink_extracted_and_removed():
    text, thread_ts = extract_thread_reference(
        "https://x.slack.com/archives/C1/p1234567890123456 hello"
    )
    assert text == "hello"
    assert thread_ts == "1234567890.123456"


def test_plain_text_unchanged():
    assert extract_thread_reference("justtext") == ("justtext", None)


def test_multi_word_rest_preserved():
    text, thread_ts = extract_thread_reference(
        "https://acme.slack.com/archives/C0ABC/p1706123456789012 Uwaga,  nowa zagadka!"
    )
    assert text == "Uwaga,  nowa zagadka!"
    assert thread_ts == "1706123456.789012"


def test_slack_formatted_link_accepted():
    text, thread_ts = extract_thread_reference(
        "<https://acme.slack.com/archives/C0ABC/p1706123456789012|link> hej"
    )
    assert (text, thread_ts) == ("hej", "1706123456.789012")


def test_permalink_with_query_string():
    text, thread_ts = extract_thread_reference(
        "https://acme.slack.com/archives/C0ABC/p1706123456789012?thread_ts=1706123456.789012&cid=C0ABC hi"
    )
    assert (text, thread_ts) == ("hi", "1706123456.789012")


def test_other_domain_ignored():
    original = "https://example.com/archives/C1/p1234567890123456 hello"
    assert extract_thread_reference(original) == (original, None)


def test_lookalike_domain_ignored():
    original = "https://evilslack.com/archives/C1/p1234567890123456 hello"
    assert extract_thread_reference(original) == (original, None)


@pytest.mark.parametrize("segment", ["p123456789012345", "p12345678901234567", "x1234567890123456"])
def test_wrong_digit_run_ignored(segment):
    original = f"https://x.slack.com/archives/C1/{segment} hello"
    assert extract_thread_reference(original) == (original, None)


def test_malformed_url_does_not_raise():
    original = "http://[::1 broken"
    assert extract_thread_reference(original) == (original, None)


def test_url_alone_leaves_empty_text():
    assert extract_thread_reference("https://x.slack.com/archives/C1/p1234567890123456") == (
        "",
        "1234567890.123456",
    )


def test_empty_text():
    assert extract_thread_reference("") == ("", None)


def test_custom_domain():
    text, thread_ts = extract_thread_reference(
        "https://team.enterprise.example/archives/C1/p1234567890123456 yo",
        domain="enterprise.example",
    )
    assert (text, thread_ts) == ("yo", "1234567890.123456")


def test_permalink_to_ts():
    assert permalink_to_ts("1706123456789012") == "1706123456.789012"
