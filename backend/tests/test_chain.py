from datetime import date

import pytest

from app.services import messages
from conftest import FakeProvider
from conversation.models import EntitySet, QueryContext, Turn
from llm.chain import FailureKind, SalesQueryCore, SqlGenerationError, UnsafeSqlError, uses_referential_language
from llm.providers import ProviderError, ProviderTimeout


def core_with(*replies):
    provider = FakeProvider(*replies)
    return SalesQueryCore(provider, today=lambda: date(2026, 1, 15)), provider


def test_generation_prompt_carries_date_windows_and_history(ranking_history):
    core, _ = core_with()
    msgs = core.generation_messages("and last year?", ranking_history)

    assert msgs[0]["role"] == "system"
    assert "DATEKEY >= 20251001 AND DATEKEY <= 20251231" in msgs[0]["content"]
    assert msgs[1] == {"role": "user", "content": "Previous question: Top 2 distributors by sales last month"}
    assert msgs[2]["content"].startswith("Previous context: Here are the top distributors")
    assert msgs[-1] == {"role": "user", "content": "and last year?"}


def test_entity_note_for_referential_questions():
    core, _ = core_with()
    entities = EntitySet(entities=["ACME CORP", "BETA LTD"], entity_type="distributors", period="last month")

    msgs = core.generation_messages("top products for these", entities=entities)
    note = msgs[1]["content"]
    assert "Previously listed distributors: ACME CORP, BETA LTD" in note
    assert "Time period of that answer: last month" in note

    plain = core.generation_messages("top products in 2024", entities=entities)
    assert len(plain) == 2


def test_generate_sql_cleans_output():
    core, provider = core_with("```sql\nSELECT TOP 5 * FROM DIMPRODUCT;\n```")
    assert core.generate_sql("top 5 products") == "SELECT TOP 5 * FROM DIMPRODUCT"
    assert provider.calls[0]["temperature"] == 0.2
    assert provider.calls[0]["max_tokens"] == 1500


def test_generate_sql_rejects_unsafe_output():
    core, _ = core_with("DROP TABLE FACT_SALES_ORDER")
    with pytest.raises(UnsafeSqlError) as exc:
        core.generate_sql("delete everything")
    assert exc.value.kind == FailureKind.SAFETY_CHECK_FAILED


def test_generate_sql_provider_failure():
    core, _ = core_with(ProviderError("down"))
    with pytest.raises(SqlGenerationError) as exc:
        core.generate_sql("sales")
    assert exc.value.kind == FailureKind.GENERATION_FAILED


def test_generate_sql_empty_output():
    core, _ = core_with("```sql\n```")
    with pytest.raises(SqlGenerationError):
        core.generate_sql("sales")


def test_generate_sql_timeout_propagates():
    core, _ = core_with(ProviderTimeout("slow"))
    with pytest.raises(ProviderTimeout):
        core.generate_sql("sales")


def test_compose_answer_mentions_source():
    core, provider = core_with("  ## Sales\nTotal PKR 100  ")
    answer = core.compose_answer("total sales", [{"Sales": 100}], "SELECT SUM(x) AS Sales FROM FACT_SALES_ORDER", 1)

    assert answer == "## Sales\nTotal PKR 100"
    system = provider.calls[0]["messages"][0]["content"]
    assert "Primary Sales" in system
    assert '"Sales": 100' in provider.calls[0]["messages"][1]["content"]


def test_canned_conversational_replies():
    core, provider = core_with()
    assert core.conversational_reply("who are you") == messages.who_are_you()
    assert core.conversational_reply("help") == messages.capabilities()
    assert provider.calls == []


def test_conversational_reply_falls_back_on_provider_failure():
    core, _ = core_with(ProviderTimeout("slow"))
    assert core.conversational_reply("top stuff") == messages.CONVERSATIONAL_FALLBACK


def test_metadata_confirms_known_source():
    core, provider = core_with()
    context = QueryContext(last_sql="SELECT * FROM FACT_SECONDARY_SALES", last_table=None)

    assert core.metadata_reply("is this secondary?", [], context).startswith("Yes, the data")
    assert core.metadata_reply("is this primary?", [], context).startswith("No, the data")
    assert "Secondary Sales" in core.metadata_reply("which table?", [], context)
    assert provider.calls == []


def test_metadata_unknown_source_asks_provider():
    core, provider = core_with(ProviderError("down"))
    history = [Turn(role="assistant", content="Here are the products", sql="SELECT * FROM DIMPRODUCT")]
    answer = core.metadata_reply("which table was this from?", history, QueryContext.from_history(history))

    assert answer == messages.METADATA_FALLBACK
    assert "DIMPRODUCT" in provider.calls[0]["messages"][1]["content"]


def test_referential_language():
    assert uses_referential_language("sales of each of those")
    assert not uses_referential_language("sales of theses")
