"""Shared fixtures for Listing Sheet Builder tests."""

import pytest

from listing_sheet import config
from listing_sheet.schema import DynamicPolicy, FixedPolicy
from listing_sheet.store import RecordStore

SAMPLE_TEXT = """编号：1818781769481982541
段位：黑鹰
皮肤:赛伊德-电锯惊魂
号主在线时间:上午9点~下午10:30
联系电话:13330779331

编号:1818781769481982542
段位：钻石
哈夫币：1200万
"""


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """Every test starts from the packaged config.yaml with no env override."""
    monkeypatch.delenv(config.SCHEMA_ENV_VAR, raising=False)
    config.get_config(reload=True)
    yield
    config.get_config(reload=True)


@pytest.fixture
def sample_text():
    return SAMPLE_TEXT


@pytest.fixture
def dynamic_store():
    return RecordStore(DynamicPolicy())


@pytest.fixture
def fixed_store():
    return RecordStore(FixedPolicy())
