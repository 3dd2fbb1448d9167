"""Tests for switchyard._internal.invoke."""

import pytest

from switchyard._internal.invoke import invoke, positional_arity


class TestInvoke:
    @pytest.mark.asyncio
    async def test_sync(self) -> None:
        assert await invoke(lambda x: x + 1, 1) == 2

    @pytest.mark.asyncio
    async def test_async(self) -> None:
        async def double(x):
            return x * 2

        assert await invoke(double, 4) == 8


class TestPositionalArity:
    def test_counts_positional(self) -> None:
        assert positional_arity(lambda: None) == 0
        assert positional_arity(lambda request: None) == 1
        assert positional_arity(lambda request, next: None) == 2

    def test_keyword_only_not_counted(self) -> None:
        def handler(request, *, flag=False):
            return None

        assert positional_arity(handler) == 1

    def test_var_positional_is_unbounded(self) -> None:
        assert positional_arity(lambda *args: None) >= 2

    def test_bound_method(self) -> None:
        class Handlers:
            def show(self, request):
                return None

        assert positional_arity(Handlers().show) == 1
