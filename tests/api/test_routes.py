"""API Routes — tests for the HTTP surface over the stub-engine session.

Tests cover:
    - Health liveness and readiness
    - PUT /configuration applies settings (204) and maps rejection to 400
    - POST /content/format: formatted, blocked, debug IR key presence
    - POST /content/lint returns engine diagnostics
    - POST /diagnostics/print renders previously linted diagnostics
    - Domain errors surface as the structured error envelope
"""

from tests.engine_stub import EngineFailure


async def test_health(client):
    resp = await client.get("/api/v1/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_ready_when_session_active(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 200
    assert resp.json()["checks"]["engine"] == "active"


async def test_not_ready_after_shutdown(client, session):
    session.shutdown()
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503


async def test_apply_configuration(client, engine):
    resp = await client.put(
        "/api/v1/configuration",
        json={"configuration": {"formatter": {"indentWidth": 4}}},
    )
    assert resp.status_code == 204
    assert engine.settings[0]["configuration"] == {"formatter": {"indentWidth": 4}}


async def test_rejected_configuration_is_400(client, engine):
    engine.fail["update_settings"] = EngineFailure(
        "bad", diagnostic={"description": "Unknown key"},
    )
    resp = await client.put("/api/v1/configuration", json={"configuration": {"x": 1}})
    assert resp.status_code == 400
    body = resp.json()["error"]
    assert body["code"] == "CONFIGURATION_ERROR"
    assert body["context"]["diagnostic"] == {"description": "Unknown key"}


async def test_format_content(client, engine):
    resp = await client.post(
        "/api/v1/content/format",
        json={"content": "let  a =  1;", "file_path": "a.js"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body == {"content": "let a = 1;\n", "diagnostics": []}
    assert engine.open_count == engine.close_count == 1


async def test_format_blocked_content(client):
    resp = await client.post(
        "/api/v1/content/format",
        json={"content": "if (a) {", "file_path": "a.js", "debug": True},
    )
    body = resp.json()
    assert body["content"] == "if (a) {"
    assert body["diagnostics"][0]["severity"] == "error"
    assert "ir" not in body


async def test_format_debug_returns_ir(client):
    resp = await client.post(
        "/api/v1/content/format",
        json={"content": "let a;", "file_path": "a.js", "debug": True},
    )
    assert resp.json()["ir"]


async def test_format_range(client, engine):
    resp = await client.post(
        "/api/v1/content/format",
        json={"content": "a  b\nc  d\n", "file_path": "a.js", "range": [0, 4]},
    )
    assert resp.json()["content"] == "a b\nc  d\n"
    assert engine.called("format_file") == []


async def test_invalid_range_is_400(client, engine):
    resp = await client.post(
        "/api/v1/content/format",
        json={"content": "x", "file_path": "a.js", "range": [4, 1]},
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "OPTIONS_VALIDATION_ERROR"
    assert engine.open_count == 0


async def test_missing_content_is_validation_error(client, engine):
    resp = await client.post("/api/v1/content/lint", json={"file_path": "a.js"})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "OPTIONS_VALIDATION_ERROR"
    assert error["context"]["operation"] == "lint_content"
    assert error["details"][0]["field"] == "content"
    assert engine.open_count == 0


async def test_malformed_print_body_names_operation(client):
    resp = await client.post(
        "/api/v1/diagnostics/print",
        json={"diagnostics": "nope", "file_path": "a.js", "file_source": ""},
    )
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["context"]["operation"] == "print_diagnostics"
    assert error["details"][0]["field"] == "diagnostics"


async def test_analysis_failure_is_422(client, engine):
    engine.fail["format_file"] = EngineFailure("formatter panicked")
    resp = await client.post(
        "/api/v1/content/format", json={"content": "x", "file_path": "a.js"},
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["context"]["operation"] == "format_file"
    assert engine.open_count == engine.close_count == 1


async def test_lint_then_print(client):
    lint = await client.post(
        "/api/v1/content/lint", json={"content": "var a;\n", "file_path": "a.js"},
    )
    diagnostics = lint.json()["diagnostics"]
    assert [d["category"] for d in diagnostics] == ["lint/style/noVar"]

    printed = await client.post(
        "/api/v1/diagnostics/print",
        json={
            "diagnostics": diagnostics,
            "file_path": "a.js",
            "file_source": "var a;\n",
        },
    )
    assert printed.status_code == 200
    assert printed.json()["output"] == "warning: Use let or const instead of var\n"


async def test_operations_after_shutdown_are_409(client, session):
    session.shutdown()
    resp = await client.post(
        "/api/v1/content/lint", json={"content": "x", "file_path": "a.js"},
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "USAGE_ERROR"
