import re

from app.llm.service.tools import LocalTools, get_current_time


def test_get_current_time_uses_pt_br_format():
    result = get_current_time("America/Sao_Paulo")

    assert re.fullmatch(r"\d{2}/\d{2}/\d{4}, \d{2}:\d{2}:\d{2}", result["currentTime"])


def test_local_tools_declares_current_time():
    tools = LocalTools()

    names = [d["name"] for d in tools.declarations]

    assert names == ["getCurrentTime"]


def test_local_tools_calls_known_function():
    result = LocalTools(timezone="UTC").call("getCurrentTime", {})

    assert "currentTime" in result


def test_local_tools_reports_unknown_function():
    result = LocalTools().call("deleteEverything")

    assert result == {"error": "Unknown function: deleteEverything"}
