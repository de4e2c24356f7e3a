"""Shared pytest fixtures for the full crptclient test suite."""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterator

import pytest

from crptclient.models.datatypes import Description, Document, Product


@pytest.fixture
def sample_document() -> Document:
    """Provide a fully populated goods-introduction document."""

    return Document(
        description=Description(participant_inn="1234567890"),
        doc_id="doc_id_value",
        doc_status="DRAFT",
        doc_type="LP_INTRODUCE_GOODS",
        import_request=True,
        owner_inn="owner_inn_value",
        participant_inn="participant_inn_value",
        producer_inn="producer_inn_value",
        production_date="2020-01-23",
        production_type="production_type_value",
        products=(
            Product(
                certificate_document="CONFORMITY_CERTIFICATE",
                certificate_document_date="2020-01-23",
                certificate_document_number="cert-1",
                owner_inn="owner_inn_value",
                producer_inn="producer_inn_value",
                production_date="2020-01-23",
                tnved_code="6401100000",
                uit_code="uit-1",
            ),
        ),
        reg_date="2020-01-23",
        reg_number="reg_number_value",
    )


@pytest.fixture
def wait_until() -> Callable[..., bool]:
    """Provide a polling helper that waits for a predicate to become true."""

    def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        """Poll `predicate` until it holds or `timeout` seconds elapse."""

        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.005)
        return predicate()

    return _wait_until


@pytest.fixture
def spawn() -> Iterator[Callable[..., threading.Thread]]:
    """Start daemon threads and join them at test teardown."""

    threads: list[threading.Thread] = []

    def _spawn(target: Callable[[], None]) -> threading.Thread:
        """Start one daemon worker thread running `target`."""

        thread = threading.Thread(target=target, daemon=True)
        threads.append(thread)
        thread.start()
        return thread

    yield _spawn
    for thread in threads:
        thread.join(timeout=2.0)
