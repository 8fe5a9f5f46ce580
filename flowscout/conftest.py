"""Shared fixtures: a small workflow catalog and a deterministic embedder."""

from __future__ import annotations

import re
from typing import Any

import numpy as np
import pytest

VOCABULARY = [
    "gmail", "slack", "notification", "email", "invoice", "telegram",
    "sales", "report", "github", "discord", "backup", "social",
    "customer", "data", "sheets", "bot",
]


class KeywordEmbedder:
    """Bag-of-words embedder over a fixed vocabulary.

    Texts sharing no vocabulary word embed to the zero vector.
    """

    def __init__(self, vocabulary: list[str] | None = None) -> None:
        self.vocabulary = vocabulary or VOCABULARY
        self.calls: list[str] = []

    def vector(self, text: str) -> np.ndarray:
        tokens = re.findall(r"[a-z0-9]+", text.lower())
        return np.array([tokens.count(word) for word in self.vocabulary], dtype=np.float64)

    async def embed(self, text: str) -> np.ndarray:
        self.calls.append(text)
        return self.vector(text)


def make_records() -> list[dict[str, Any]]:
    """Ten workflow templates; exactly two list Telegram."""
    return [
        {
            "id": "gmail-slack",
            "title": "Gmail to Slack Notification",
            "description": "Send a Slack notification whenever a new Gmail message arrives",
            "services": ["Gmail", "Slack"],
            "actions": ["read_email", "post_message"],
            "keywords": ["gmail", "slack", "notification"],
            "category": "Communication & Messaging",
            "complexity": "low",
            "rating": 4.5,
        },
        {
            "id": "invoice-processing",
            "title": "Invoice Processing Workflow",
            "description": "Read invoices received by email and record them in accounting",
            "services": ["Gmail", "Google Drive", "QuickBooks"],
            "actions": ["read_email", "extract_data", "create_invoice"],
            "keywords": ["invoice", "accounting"],
            "category": "Business & Operations",
            "complexity": "high",
            "rating": 4.0,
        },
        {
            "id": "sales-aggregation",
            "title": "Sales Data Aggregation",
            "description": "Collect sales data from several sources and send a report",
            "services": ["Salesforce", "Google Sheets", "Telegram"],
            "actions": ["fetch_data", "create_report", "send_notification"],
            "keywords": ["sales", "report", "analytics"],
            "category": "Data Management",
            "complexity": "high",
            "rating": 3.5,
        },
        {
            "id": "telegram-digest",
            "title": "Telegram Bot Daily Digest",
            "description": "Post a daily digest of RSS headlines to a Telegram channel",
            "services": ["Telegram", "RSS"],
            "actions": ["fetch_feed", "send_message"],
            "keywords": ["telegram", "bot", "news"],
            "category": "Communication & Messaging",
            "complexity": "medium",
            "rating": 4.2,
        },
        {
            "id": "customer-onboarding",
            "title": "Customer Onboarding Automation",
            "description": "Create CRM contacts, send welcome emails and follow-up tasks",
            "services": ["HubSpot", "Gmail", "Slack", "Asana"],
            "actions": ["create_contact", "send_email", "post_message", "create_task"],
            "keywords": ["customer", "onboarding", "crm"],
            "category": "Business & Operations",
            "complexity": "medium",
            "rating": 4.8,
        },
        {
            "id": "social-responder",
            "title": "Social Media Auto-Responder",
            "description": "Reply to mentions and comments on social networks using AI",
            "services": ["Twitter", "Facebook", "OpenAI"],
            "actions": ["monitor_mentions", "generate_response", "post_reply"],
            "keywords": ["social", "ai", "support"],
            "category": "Communication & Messaging",
            "complexity": "medium",
            "rating": 3.9,
        },
        {
            "id": "github-sync",
            "title": "GitHub Issue Tracker Sync",
            "description": "Mirror GitHub issues into Jira and keep their status in sync",
            "services": ["GitHub", "Jira"],
            "actions": ["list_issues", "create_ticket"],
            "keywords": ["github", "issues", "devops"],
            "category": "DevOps",
            "complexity": "medium",
            "rating": 4.1,
        },
        {
            "id": "weekly-sheets-report",
            "title": "Weekly Report to Google Sheets",
            "description": "Append weekly metrics from Airtable to a Google Sheets report",
            "services": ["Google Sheets", "Airtable"],
            "actions": ["read_records", "append_row"],
            "keywords": ["report", "sheets", "weekly"],
            "category": "Data Management",
            "complexity": "low",
            "rating": 3.2,
        },
        {
            "id": "discord-moderation",
            "title": "Discord Server Moderation",
            "description": "Flag abusive Discord messages with an AI classifier",
            "services": ["Discord", "OpenAI"],
            "actions": ["read_message", "classify", "delete_message"],
            "keywords": ["discord", "moderation"],
            "category": "Communication & Messaging",
            "complexity": "high",
            "rating": 4.6,
        },
        {
            "id": "dropbox-backup",
            "title": "Backup Dropbox Files to S3",
            "description": "Copy new Dropbox files into an S3 bucket every night",
            "services": ["Dropbox", "AWS S3"],
            "actions": ["list_files", "upload_object"],
            "keywords": ["backup", "storage"],
            "category": "DevOps",
            "complexity": "low",
            "rating": 3.0,
        },
    ]


@pytest.fixture
def records() -> list[dict[str, Any]]:
    """Raw workflow records in insertion order."""
    return make_records()


@pytest.fixture
def keyword_embedder() -> KeywordEmbedder:
    """Deterministic bag-of-words embedder."""
    return KeywordEmbedder()
