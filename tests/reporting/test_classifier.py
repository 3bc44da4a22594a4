"""Unit tests for reporting.classifier and the category table."""
from __future__ import annotations

import json

from src.reporting.categories import CategoryDefinition, load_categories
from src.reporting.classifier import classify_questions, question_columns

HEADERS = [
    "ID",
    "Hora de início",
    "Hora de conclusão",
    "Email",
    "Nome",
    "Hora da última modificação",
    "Qual sua função?",
    "Qual seu setor?",
    "Sinto PRESSÃO com prazos",
    "Posso decidir quando fazer uma pausa",
    "Tenho pausas e posso decidir como trabalhar",
    "Pergunta sem tema",
]


def test_question_columns_drop_identity_columns():
    assert question_columns(HEADERS) == [
        "Sinto PRESSÃO com prazos",
        "Posso decidir quando fazer uma pausa",
        "Tenho pausas e posso decidir como trabalhar",
        "Pergunta sem tema",
    ]


def test_default_table_has_six_categories_in_order():
    names = [c.name for c in load_categories()]
    assert names == ["Demands", "Relationships", "Control", "Support", "Clarity", "Change"]
    assert all(c.description and c.keywords for c in load_categories())


def test_classification_is_case_insensitive_and_non_exclusive():
    questions = question_columns(HEADERS)
    membership = classify_questions(questions, load_categories())

    assert membership["Demands"].questions == [
        "Sinto PRESSÃO com prazos",
        "Tenho pausas e posso decidir como trabalhar",
    ]
    assert membership["Control"].questions == [
        "Posso decidir quando fazer uma pausa",
        "Tenho pausas e posso decidir como trabalhar",
    ]
    assert membership["Change"].questions == []


def test_unmatched_question_belongs_to_no_category():
    membership = classify_questions(["Pergunta sem tema"], load_categories())
    assert all(m.questions == [] for m in membership.values())
    assert set(membership) == {c.name for c in load_categories()}


def test_custom_table_from_file(tmp_path):
    path = tmp_path / "categories.json"
    path.write_text(
        json.dumps([{"name": "Sleep", "description": "Rest", "keywords": ["Sono"]}]),
        encoding="utf-8",
    )
    table = load_categories(path)

    assert table == (CategoryDefinition("Sleep", "Rest", ("Sono",)),)
    membership = classify_questions(["Meu sono é bom", "Outra"], table)
    assert membership["Sleep"].description == "Rest"
    assert membership["Sleep"].questions == ["Meu sono é bom"]
