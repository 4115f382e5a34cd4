"""Tests for fingerprints and tags."""

import re

from peppermint.core.fingerprint import fingerprint, fingerprint_from_tag, make_tag


def test_known_values():
    assert fingerprint("", "") == "0"
    assert fingerprint("a", "") == "2p"
    assert fingerprint("ab", "") == "2e9"


def test_title_and_body_are_concatenated():
    assert fingerprint("Peppermint Tracker", "New update!") == fingerprint(
        "Peppermint TrackerNew update!", ""
    )


def test_deterministic():
    samples = [("Peppermint Tracker", "New update!"), ("", "body"), ("🐧", "❄️ spotted")]
    for title, body in samples:
        assert fingerprint(title, body) == fingerprint(title, body)


def test_long_input_wraps_to_short_token():
    token = fingerprint("x" * 300, "y" * 300)
    assert re.fullmatch(r"[0-9a-z]{1,7}", token)


def test_no_collisions_over_corpus():
    pairs = set()
    for i in range(60):
        pairs.add((f"{chr(65 + i % 26)}{i} sent a message", f"Message number {i}"))
        pairs.add((f"New photo from user{i}!", f"Caption {i * 7}"))
    pairs.add(("Peppermint Tracker", "New update!"))
    assert len(pairs) >= 100

    tokens = {fingerprint(title, body) for title, body in pairs}
    assert len(tokens) == len(pairs)


def test_tag_round_trip():
    token = fingerprint("Peppermint Tracker", "New update!")
    tag = make_tag("peppermint", token)
    assert tag == f"peppermint-{token}"
    assert fingerprint_from_tag(tag, "peppermint") == token


def test_foreign_tag_is_rejected():
    assert fingerprint_from_tag("other-abc", "peppermint") is None
    assert fingerprint_from_tag("peppermint-", "peppermint") is None
