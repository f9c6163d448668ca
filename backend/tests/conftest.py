"""Shared fixtures: in-memory SQLite sessions, fake Redis, fake OpenAI client, row builders."""

from __future__ import annotations

import fnmatch
import json
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
import redis
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.model  # noqa: F401  (registers the tables)
from app.db.base import Base



# ---------- database ----------
@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        Base.metadata.drop_all(eng)
        eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, class_=Session, future=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()



# ---------- redis ----------
class FakeRedis:
    """The handful of redis-py calls the content cache uses."""

    def __init__(self, *, fail: bool = False):
        self.store: Dict[str, str] = {}
        self.ttls: Dict[str, int] = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("redis is down")

    def get(self, key):
        self._check()
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        self.ttls[key] = int(ttl)
        return True

    def delete(self, *keys):
        self._check()
        removed = 0
        for k in keys:
            if self.store.pop(k, None) is not None:
                self.ttls.pop(k, None)
                removed += 1
        return removed

    def scan_iter(self, match="*", count=None):
        self._check()
        return iter([k for k in list(self.store) if fnmatch.fnmatch(k, match)])


@pytest.fixture()
def fake_redis():
    return FakeRedis()


@pytest.fixture()
def broken_redis():
    return FakeRedis(fail=True)



# ---------- OpenAI ----------
class FakeResponses:
    """
    Stand-in for client.responses. Each create() call is recorded; the reply is
    built by `reply(payloads, call_no)` which returns either text or raises.
    """

    def __init__(self, reply: Callable[[List[Dict[str, Any]], int], str]):
        self.reply = reply
        self.calls: List[Dict[str, Any]] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        payloads = json.loads(kwargs["prompt"]["variables"]["products"])
        text = self.reply(payloads, len(self.calls))
        return SimpleNamespace(output_text=text)


class FakeOpenAI:
    def __init__(self, reply: Optional[Callable[[List[Dict[str, Any]], int], str]] = None):
        self.responses = FakeResponses(reply or echo_copy_reply)

    @property
    def calls(self):
        return self.responses.calls


def echo_copy_reply(payloads: List[Dict[str, Any]], call_no: int) -> str:
    """Generated copy for every payload, keyed like the real prompt output."""
    products = []
    for p in payloads:
        if "SKU" in p:
            products.append({
                "SKU": p["SKU"],
                "Short description": f"Short copy for {p['Name']}",
                "Description": f"<p>Long copy for {p['Name']}</p>",
                "SEO Title": f"{p['Name']} | Shop",
                "Meta Description": f"Buy {p['Name']} online",
            })
        else:
            products.append({
                "Handle": p["Handle"],
                "Body (HTML)": f"<p>{p['Title']} body</p>",
                "SEO Title": f"{p['Title']} | Store",
                "SEO Description": f"All about {p['Title']}",
                "Image Alt Text": f"{p['Title']} photo",
            })
    return "```json\n" + json.dumps({"products": products}) + "\n```"


@pytest.fixture()
def fake_openai():
    return FakeOpenAI()


@pytest.fixture()
def make_fake_openai():
    return FakeOpenAI



# ---------- product rows ----------
def _woo_row(i: int, **overrides) -> Dict[str, Any]:
    row = {
        "ID": str(1000 + i),
        "Type": "simple",
        "SKU": f"SKU-{i:03d}",
        "Name": f"Product {i}",
        "Published": 1,
        "Regular price": "19.90",
        "Categories": "Home > Kitchen",
        "Tags": "kitchen, steel",
        "Images": f"https://cdn.example.com/{i}.jpg",
        "Stock": 5,
        "Weight (kg)": "1.2",
        "Attribute 1 name": "Color",
        "Attribute 1 value(s)": "Red",
        "Short description": "",
        "Description": "",
        "Custom Column": f"keep-{i}",
    }
    row.update(overrides)
    return row


def _shopify_row(handle: str, **overrides) -> Dict[str, Any]:
    row = {
        "Handle": handle,
        "Title": handle.replace("-", " ").title(),
        "Vendor": "Acme",
        "Type": "Shirts",
        "Tags": "cotton",
        "Option1 Name": "Size",
        "Option1 Value": "M",
        "Variant SKU": f"{handle}-M",
        "Variant Price": "25.00",
        "Image Src": f"https://cdn.example.com/{handle}.jpg",
        "Status": "active",
    }
    row.update(overrides)
    return row


@pytest.fixture()
def woo_row():
    return _woo_row


@pytest.fixture()
def woo_rows():
    return lambda n, start=1: [_woo_row(i) for i in range(start, start + n)]


@pytest.fixture()
def shopify_row():
    return _shopify_row


@pytest.fixture()
def echo_reply():
    return echo_copy_reply
