import pytest
from shopify_admin_api.core.errors import (
    ForbiddenError,
    NotFoundError,
    ServerRequestError,
    UnauthorizedError,
)
from shopify_admin_api.core.retry import with_reauth_retry


class Script:
    """Attempt that replays a list of outcomes (exceptions are raised)."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class Recover:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1


def _unauthorized():
    return UnauthorizedError("Invalid API key or access token", status_code=401)


@pytest.mark.asyncio
async def test_success_without_recovery():
    attempt, recover = Script({"ok": 1}), Recover()
    assert await with_reauth_retry(attempt, recover) == {"ok": 1}
    assert attempt.calls == 1
    assert recover.calls == 0


@pytest.mark.asyncio
async def test_unauthorized_then_success_recovers_once():
    attempt, recover = Script(_unauthorized(), {"ok": 2}), Recover()
    assert await with_reauth_retry(attempt, recover) == {"ok": 2}
    assert attempt.calls == 2
    assert recover.calls == 1


@pytest.mark.asyncio
async def test_unauthorized_twice_propagates_after_one_recovery():
    attempt, recover = Script(_unauthorized(), _unauthorized(), {"never": 1}), Recover()
    with pytest.raises(UnauthorizedError):
        await with_reauth_retry(attempt, recover)
    assert attempt.calls == 2
    assert recover.calls == 1


@pytest.mark.asyncio
async def test_zero_budget_never_recovers():
    attempt, recover = Script(_unauthorized()), Recover()
    with pytest.raises(UnauthorizedError):
        await with_reauth_retry(attempt, recover, retries=0)
    assert recover.calls == 0


@pytest.mark.asyncio
async def test_larger_budget_is_honoured():
    attempt = Script(_unauthorized(), _unauthorized(), {"ok": 3})
    recover = Recover()
    assert await with_reauth_retry(attempt, recover, retries=2) == {"ok": 3}
    assert recover.calls == 2


@pytest.mark.parametrize(
    "error",
    [
        ForbiddenError("denied", status_code=403),
        NotFoundError("missing", status_code=404),
        ServerRequestError("down", status_code=500),
        RuntimeError("unrelated"),
    ],
)
@pytest.mark.asyncio
async def test_other_errors_propagate_unchanged(error):
    attempt, recover = Script(error), Recover()
    with pytest.raises(type(error)) as exc:
        await with_reauth_retry(attempt, recover)
    assert exc.value is error
    assert attempt.calls == 1
    assert recover.calls == 0


@pytest.mark.asyncio
async def test_recovery_failure_propagates():
    class Boom(Exception):
        pass

    async def recover():
        raise Boom("cannot log in")

    attempt = Script(_unauthorized(), {"ok": 1})
    with pytest.raises(Boom):
        await with_reauth_retry(attempt, recover)
    assert attempt.calls == 1
