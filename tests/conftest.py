from __future__ import annotations

import sys
from pathlib import Path

import httpx
import pytest

# Make packages importable when running tests from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

SAMPLE_CSV = (
    "id,akha,pronunciation,thai,english,category,tags,ex_akha,ex_thai,ex_english\n"
    "w1,Aq kaq,a ka,อาข่า,Akha,People,culture|ethnic,,,\n"
    "w2,Hhaq,ha,หมู,pig,Animals,farm | food,Hhaq ma,หมูตัวนี้,This pig\n"
    ",Ghaq,gha,,chicken,Animals,,,,\n"
    "w4,Lo,lo,น้ำ,water,,,,,\n"
)

SHEET_URL = "https://sheets.example.com/export?format=csv"


def mock_client(body: str = SAMPLE_CSV, status_code: int = 200, calls: list | None = None) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, text=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def sample_csv() -> str:
    return SAMPLE_CSV
