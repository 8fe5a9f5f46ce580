"""Tests for the fuzzy lexical matcher."""

from __future__ import annotations

from typing import Any

import pytest

from flowscout.domains.catalog.corpus import build_documents
from flowscout.domains.catalog.models import WorkflowDocument

from .lexical import LexicalMatcher
from .models import FieldWeights


@pytest.fixture
def documents(records: list[dict[str, Any]]) -> list[WorkflowDocument]:
    docs, _ = build_documents(records)
    return docs


def test_exact_title_ranks_first(documents: list[WorkflowDocument]) -> None:
    """Test a query matching a title word-for-word ranks that template first."""
    matches = LexicalMatcher().match("gmail slack notification", documents)

    assert matches[0][0] == "gmail-slack"
    assert matches[0][1] > 0.8


def test_exact_title_beats_longer_title_containing_query() -> None:
    """Test extra title words cost score even when every query word is present."""
    shared = {
        "description": "Post a Slack notification for new Gmail messages",
        "services": ["Gmail", "Slack"],
    }
    docs, _ = build_documents(
        [
            {"id": "digest", "title": "Gmail Slack Notification Digest and Archive", **shared},
            {"id": "exact", "title": "Gmail to Slack Notification", **shared},
            {"id": "other", "title": "Dropbox Backup", "description": "Copy files to S3"},
        ]
    )

    matches = dict(LexicalMatcher(acceptance_threshold=0.0).match("gmail slack notification", docs))

    assert list(matches)[0] == "exact"
    assert matches["exact"] > matches["digest"] > matches["other"]


def test_only_identical_tokens_score_one() -> None:
    """Test a field holding the query plus extra words scores below 1.0."""
    exact = WorkflowDocument(id="a", title="Slack Alerts", description="Slack alerts")
    longer = WorkflowDocument(
        id="b", title="Slack Alerts Archive", description="Slack alerts archive"
    )
    matcher = LexicalMatcher()

    assert matcher.score_document("slack alerts", exact) == pytest.approx(1.0)
    assert matcher.score_document("slack alerts", longer) < 0.95


def test_tolerates_typos(documents: list[WorkflowDocument]) -> None:
    """Test misspelled queries still find the intended template."""
    matches = LexicalMatcher().match("gmial slack notfication", documents)
    assert matches
    assert matches[0][0] == "gmail-slack"


def test_tolerates_word_reordering(documents: list[WorkflowDocument]) -> None:
    """Test token order does not matter."""
    forward = LexicalMatcher().match("telegram bot digest", documents)
    reversed_ = LexicalMatcher().match("digest bot telegram", documents)
    assert forward == reversed_
    assert forward[0][0] == "telegram-digest"


@pytest.mark.parametrize("query", ["", "   ", "?!"])
def test_empty_query_returns_nothing(documents: list[WorkflowDocument], query: str) -> None:
    """Test blank or punctuation-only queries produce no lexical candidates."""
    assert LexicalMatcher().match(query, documents) == []


def test_unrelated_query_is_rejected(documents: list[WorkflowDocument]) -> None:
    """Test documents below the acceptance threshold are excluded."""
    assert LexicalMatcher().match("zzzzzz qqqqqq", documents) == []


def test_acceptance_threshold_is_tunable(documents: list[WorkflowDocument]) -> None:
    """Test a strict threshold keeps only near-exact matches."""
    strict = LexicalMatcher(acceptance_threshold=0.8)
    matches = strict.match("gmail slack notification", documents)
    assert [doc_id for doc_id, _ in matches] == ["gmail-slack"]


def test_candidate_limit(documents: list[WorkflowDocument]) -> None:
    """Test the output is capped."""
    matcher = LexicalMatcher(acceptance_threshold=0.0, candidate_limit=3)
    assert len(matcher.match("slack", documents)) == 3


def test_scores_are_bounded_and_sorted(documents: list[WorkflowDocument]) -> None:
    """Test scores lie in [0, 1] and come out best first."""
    matches = LexicalMatcher(acceptance_threshold=0.0).match("report sheets", documents)
    scores = [score for _, score in matches]
    assert all(0.0 <= s <= 1.0 for s in scores)
    assert scores == sorted(scores, reverse=True)


def test_ties_follow_insertion_order() -> None:
    """Test identical documents keep corpus order."""
    docs, _ = build_documents(
        [
            {"id": f"copy-{i}", "title": "Slack Alerts", "description": "Slack alerts"}
            for i in range(4)
        ]
    )
    matches = LexicalMatcher().match("slack alerts", docs)
    assert [doc_id for doc_id, _ in matches] == ["copy-0", "copy-1", "copy-2", "copy-3"]
    assert len({score for _, score in matches}) == 1


def test_empty_fields_do_not_penalize() -> None:
    """Test a document without services, actions or keywords can still score 1.0."""
    doc = WorkflowDocument(id="d", title="Slack Alerts", description="ALERTS: slack!")
    matcher = LexicalMatcher()
    assert matcher.score_document("slack alerts", doc) == pytest.approx(1.0)


def test_field_weights_shift_ranking() -> None:
    """Test weighting decides between a title hit and a keyword hit."""
    docs, _ = build_documents(
        [
            {
                "id": "keyword-hit",
                "title": "Nightly Export",
                "description": "Export rows",
                "keywords": ["trello"],
            },
            {
                "id": "title-hit",
                "title": "Trello",
                "description": "Export rows",
                "keywords": ["nightly"],
            },
        ]
    )
    title_heavy = LexicalMatcher(acceptance_threshold=0.0)
    keyword_heavy = LexicalMatcher(
        field_weights=FieldWeights(title=0.05, description=0.3, keywords=0.4),
        acceptance_threshold=0.0,
    )

    assert title_heavy.match("trello", docs)[0][0] == "title-hit"
    assert keyword_heavy.match("trello", docs)[0][0] == "keyword-hit"
