import pytest

from datasources.exceptions import DataSourceUnavailable, InvalidQuery, QueryTimeout
from datasources.retry import retry


@pytest.mark.asyncio
async def test_retry_async_success_after_failure():
    calls = []

    @retry(attempts=3, delay=0.01, backoff=1)
    async def flaky(x):
        calls.append(x)
        if len(calls) < 2:
            raise QueryTimeout("temporary")
        return x * 2

    result = await flaky(5)
    assert result == 10
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retry_exhausted():
    calls = []

    @retry(attempts=2, delay=0.01, backoff=1)
    async def always_fail():
        calls.append(1)
        raise DataSourceUnavailable("nope")

    with pytest.raises(DataSourceUnavailable):
        await always_fail()
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retry_ignores_non_transient_errors():
    calls = []

    @retry(attempts=5, delay=0.01, backoff=1)
    async def bad_request():
        calls.append(1)
        raise InvalidQuery("400")

    with pytest.raises(InvalidQuery):
        await bad_request()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retry_custom_exceptions():
    calls = []

    @retry(attempts=3, delay=0, backoff=1, exceptions=(ValueError,))
    async def flaky():
        calls.append(1)
        if len(calls) < 3:
            raise ValueError("again")
        return "ok"

    assert await flaky() == "ok"


def test_retry_rejects_sync_functions():
    with pytest.raises(TypeError):

        @retry(attempts=2)
        def sync():
            return 1
