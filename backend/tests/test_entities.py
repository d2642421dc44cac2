from conversation.entities import detect_entity_type, detect_period, extract_entities, extract_names
from conversation.models import Turn


def test_numbered_list_in_order():
    history = [Turn(role="assistant", content="1. ACME CORP: PKR 1,000\n2. BETA LTD: PKR 900")]
    assert extract_entities(history).entities == ["ACME CORP", "BETA LTD"]


def test_bold_markdown_list():
    text = "**GAMMA TRADERS**: PKR 5,000\n**DELTA & SONS**: PKR 4,200"
    assert extract_names(text) == ["GAMMA TRADERS", "DELTA & SONS"]


def test_bulleted_list():
    text = "- Chocolate Chip: Rs. 12,000\n• Tuc Biscuit: Rs. 9,500"
    assert extract_names(text) == ["Chocolate Chip", "Tuc Biscuit"]


def test_pipe_table_rows():
    text = "| # | Distributor | Sales |\n|---|---|---|\n| 1 | ACME CORP | PKR 1,000 |\n| 2 | BETA LTD | PKR 900 |"
    assert extract_names(text) == ["ACME CORP", "BETA LTD"]


def test_numbered_bold_names_are_not_duplicated():
    text = "1. **ACME CORP**: PKR 1,000\n2. **BETA LTD**: PKR 900\n\nACME CORP leads."
    assert extract_names(text) == ["ACME CORP", "BETA LTD"]


def test_period_labels_are_not_entities():
    text = "1. January 2024: PKR 1,000\n2. Q2: PKR 800\n3. MARKAZ TRADERS: PKR 700\n4. Total: PKR 2,500"
    assert extract_names(text) == ["MARKAZ TRADERS"]


def test_no_list_gives_empty_set():
    history = [Turn(role="assistant", content="Total sales were strong this year.")]
    entities = extract_entities(history)
    assert entities.entities == []
    assert not entities


def test_most_recent_matching_turn_wins():
    history = [
        Turn(role="user", content="top distributors"),
        Turn(role="assistant", content="1. OLD CO: PKR 10"),
        Turn(role="user", content="top products last year"),
        Turn(role="assistant", content="1. Biscuit A: PKR 20\n2. Biscuit B: PKR 15"),
        Turn(role="user", content="thanks"),
        Turn(role="assistant", content="You're welcome!"),
    ]
    entities = extract_entities(history)
    assert entities.entities == ["Biscuit A", "Biscuit B"]
    assert entities.entity_type == "products"
    assert entities.period == "last year"


def test_entity_type_and_period_from_preceding_question(ranking_history):
    entities = extract_entities(ranking_history)
    assert entities.entity_type == "distributors"
    assert entities.period == "last month"


def test_detect_helpers():
    assert detect_entity_type("top distributors and their products") == "distributors"
    assert detect_entity_type("product mix") == "products"
    assert detect_entity_type("sales") is None
    assert detect_period("sales in 2023") == "2023"
    assert detect_period("sales") is None


def test_history_is_not_modified(ranking_history):
    before = list(ranking_history)
    extract_entities(ranking_history)
    assert ranking_history == before
