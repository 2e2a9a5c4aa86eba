"""Shared corpus fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from docforest.corpus import InMemoryCorpus

# PST (0)                       container, physical file
#   F1 (0.0)       digest aaa   email
#     D1 (0.0.0)   digest bbb
#     D2 (0.0.1)                zip container inside the email
#       D3 (0.0.1.0) digest aaa
#   F2 (0.1)       digest ccc
#     D4 (0.1.0)   digest bbb
#   F3 (0.2)
# LOOSE (1)        digest aaa   loose physical file
CASE_TREE: list[dict[str, Any]] = [
    {
        "id": "PST",
        "name": "mail.pst",
        "kind": "container",
        "physical_file": True,
        "uri": "file:///C:/Evidence/mail.pst",
        "children": [
            {
                "id": "F1",
                "name": "Quarterly numbers",
                "kind": "email",
                "digest": "AAA",
                "children": [
                    {"id": "D1", "name": "report.pdf", "kind": "pdf", "digest": "BBB"},
                    {
                        "id": "D2",
                        "name": "archive.zip",
                        "kind": "container",
                        "children": [
                            {"id": "D3", "name": "numbers.doc", "kind": "document", "digest": "AAA"},
                        ],
                    },
                ],
            },
            {
                "id": "F2",
                "name": "Re: Quarterly numbers",
                "kind": "email",
                "digest": "CCC",
                "children": [{"id": "D4", "name": "report copy.pdf", "kind": "pdf", "digest": "BBB"}],
            },
            {"id": "F3", "name": "Lunch?", "kind": "email"},
        ],
    },
    {
        "id": "LOOSE",
        "name": "loose.pdf",
        "kind": "pdf",
        "physical_file": True,
        "uri": "file:///data/loose.pdf",
        "digest": "AAA",
    },
]


@pytest.fixture
def case_corpus() -> InMemoryCorpus:
    return InMemoryCorpus.from_tree(CASE_TREE)


@pytest.fixture
def corpus_file(tmp_path: Path) -> Path:
    path = tmp_path / "corpus.json"
    path.write_text(json.dumps({"records": CASE_TREE}), encoding="utf-8")
    return path
