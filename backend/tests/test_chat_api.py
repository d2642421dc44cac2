"""
Tests for the chat endpoint.
"""
from conftest import FakeExecutor, FakeProvider
from llm.providers import ProviderTimeout


def test_empty_question_is_rejected(client, use_service):
    provider = FakeProvider()
    use_service(provider)
    response = client.post("/api/v1/chat", json={"question": "   ", "history": []})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert body["error"] == "Please provide a question"
    assert provider.calls == []


def test_missing_question_is_a_validation_error(client, use_service):
    use_service(FakeProvider())
    response = client.post("/api/v1/chat", json={"history": []})
    assert response.status_code == 422


def test_conversational_reply_envelope(client, use_service):
    use_service(FakeProvider("Hello! Ask me about your sales."))
    response = client.post("/api/v1/chat", json={"question": "top stuff"})

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "conversational"
    assert body["rowCount"] == 0
    assert body["answer"] == "Hello! Ask me about your sales."
    assert "sql" not in body
    assert body["meta"]["intent"] == "conversational"


def test_success_envelope_uses_camel_case(client, use_service):
    sql = "SELECT YEAR, SUM(NET_AMOUNT) AS Sales FROM FACT_SALES_ORDER GROUP BY YEAR"
    rows = [{"Year": 2022, "Sales": 100}, {"Year": 2023, "Sales": 150}]
    use_service(FakeProvider(sql, "Sales grew."), FakeExecutor(rows=rows))
    response = client.post("/api/v1/chat", json={"question": "sales by year as a line chart"})

    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "success"
    assert body["rowCount"] == 2
    assert body["table"] == "primary"
    assert body["chartType"] == "line"
    assert body["chartData"]["xAxis"] == "Year"
    assert body["chartData"]["data"][0] == {"x": 2022, "Sales": 100}
    assert body["rawData"] == rows


def test_confirmation_through_the_api(client, use_service):
    provider = FakeProvider("SELECT SUM(NET_AMOUNT) AS Total FROM FACT_SALES_ORDER", "PKR 100")
    executor = FakeExecutor(rows=[{"Total": 100}])
    use_service(provider, executor)
    history = [
        {"role": "user", "content": "sles"},
        {"role": "assistant", "content": "Did you mean...", "type": "suggestion",
         "suggestedQuestion": "Show total sales"},
    ]
    response = client.post("/api/v1/chat", json={"question": "yes", "history": history})

    assert response.status_code == 200
    assert response.json()["type"] == "success"
    assert provider.calls[0]["messages"][-1]["content"] == "Show total sales"


def test_timeout_maps_to_gateway_timeout(client, use_service):
    use_service(FakeProvider(ProviderTimeout("slow")))
    response = client.post("/api/v1/chat", json={"question": "total sales last year"})

    assert response.status_code == 504
    assert response.json()["type"] == "timeout"
